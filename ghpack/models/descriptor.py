"""
模组描述文件模型

对应 packwiz 的 .pw.toml，附带 [packwiz_gh_release] 更新来源表。
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict

from ghpack.exceptions import DescriptorValidationError
from ghpack.models.api import ResolvedAsset

SOURCE_KEY = "packwiz_gh_release"


def _require_str(data: Dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise DescriptorValidationError(
            f"字段 {where}{key} 缺失或不是字符串",
            context={"field": f"{where}{key}", "value": value},
        )
    return value


def _require_table(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if not isinstance(value, dict):
        raise DescriptorValidationError(
            f"缺少 [{key}] 表", context={"field": key, "value": value}
        )
    return value


@dataclass
class Download:
    """下载信息"""

    url: str = ""
    hash_format: str = ""
    hash: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Download":
        return cls(
            url=_require_str(data, "url", "download."),
            hash_format=_require_str(data, "hash-format", "download."),
            hash=_require_str(data, "hash", "download."),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "hash-format": self.hash_format, "hash": self.hash}


@dataclass
class ReleaseSource:
    """GitHub Release 更新来源"""

    owner: str
    repo: str
    release_name_regex: str
    file_name_regex: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReleaseSource":
        where = f"{SOURCE_KEY}."
        return cls(
            owner=_require_str(data, "owner", where),
            repo=_require_str(data, "repo", where),
            release_name_regex=_require_str(data, "release_name_regex", where),
            file_name_regex=_require_str(data, "file_name_regex", where),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "owner": self.owner,
            "repo": self.repo,
            "release_name_regex": self.release_name_regex,
            "file_name_regex": self.file_name_regex,
        }

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class ModDescriptor:
    """
    模组描述文件

    extra 保存 packwiz 写入的其它字段（如 [update]），重写时原样保留。
    """

    name: str
    filename: str
    side: str
    download: Download
    source: ReleaseSource
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModDescriptor":
        """从 TOML 字典构建并校验结构"""
        known = {"name", "filename", "side", "download", SOURCE_KEY}
        return cls(
            name=_require_str(data, "name", ""),
            filename=_require_str(data, "filename", ""),
            side=_require_str(data, "side", ""),
            download=Download.from_dict(_require_table(data, "download")),
            source=ReleaseSource.from_dict(_require_table(data, SOURCE_KEY)),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "filename": self.filename,
            "side": self.side,
        }
        data.update(self.extra)
        data["download"] = self.download.to_dict()
        data[SOURCE_KEY] = self.source.to_dict()
        return data

    def with_resolution(self, resolved: ResolvedAsset) -> "ModDescriptor":
        """返回指向解析结果的新描述文件，其它字段不变"""
        return replace(
            self,
            filename=resolved.filename,
            download=Download(
                url=resolved.url,
                hash_format=resolved.hash_format,
                hash=resolved.hash,
            ),
        )

    def matches(self, resolved: ResolvedAsset) -> bool:
        """当前下载信息是否已指向解析结果"""
        return (
            self.filename == resolved.filename
            and self.download.url == resolved.url
            and self.download.hash_format == resolved.hash_format
            and self.download.hash == resolved.hash
        )
