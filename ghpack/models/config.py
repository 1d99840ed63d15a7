"""
配置数据模型

定义模组加载器、版本上下文与 packwiz 索引的数据类。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from loguru import logger

from ghpack.exceptions import ConfigValidationError


class ModLoader(Enum):
    """模组加载器"""

    FABRIC = "fabric"
    QUILT = "quilt"
    FORGE = "forge"
    NEOFORGE = "neoforge"


# 同时声明多个加载器时按此顺序取第一个
LOADER_PRIORITY = (
    ModLoader.FABRIC,
    ModLoader.QUILT,
    ModLoader.FORGE,
    ModLoader.NEOFORGE,
)


@dataclass(frozen=True)
class VersionContext:
    """
    运行期版本上下文

    启动时从 pack.toml 的 [versions] 构建一次，之后只读，
    用于替换正则中的 {mc_version} 与 {loader} 占位符。
    """

    minecraft: str
    loader: ModLoader

    @classmethod
    def from_versions(cls, versions: Any) -> "VersionContext":
        """从 [versions] 表构建"""
        if not isinstance(versions, dict):
            raise ConfigValidationError("pack.toml 缺少 [versions] 表")

        minecraft = versions.get("minecraft")
        if not isinstance(minecraft, str) or not minecraft:
            raise ConfigValidationError(
                "pack.toml 的 versions.minecraft 必须为非空字符串",
                context={"value": minecraft},
            )

        found = [loader for loader in LOADER_PRIORITY if loader.value in versions]
        if not found:
            raise ConfigValidationError(
                "pack.toml 未声明受支持的模组加载器 (fabric/quilt/forge/neoforge)",
                context={"keys": sorted(versions.keys())},
            )
        if len(found) > 1:
            logger.warning(
                f"pack.toml 声明了多个加载器 {[l.value for l in found]}，使用 {found[0].value}"
            )

        return cls(minecraft=minecraft, loader=found[0])


@dataclass
class IndexEntry:
    """index.toml 中的单个文件条目"""

    file: str
    hash: str
    metafile: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> "IndexEntry":
        if not isinstance(data, dict):
            raise ConfigValidationError(f"index.toml 条目格式错误: {data!r}")
        file = data.get("file")
        hash_ = data.get("hash")
        metafile = data.get("metafile", False)
        if not isinstance(file, str) or not isinstance(hash_, str):
            raise ConfigValidationError(
                "index.toml 条目缺少 file 或 hash", context={"entry": data}
            )
        if not isinstance(metafile, bool):
            raise ConfigValidationError(
                "index.toml 条目的 metafile 必须为布尔值", context={"entry": data}
            )
        return cls(file=file, hash=hash_, metafile=metafile)


@dataclass
class PackIndex:
    """packwiz index.toml"""

    hash_format: str
    files: List[IndexEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackIndex":
        hash_format = data.get("hash-format")
        if not isinstance(hash_format, str):
            raise ConfigValidationError("index.toml 缺少 hash-format")
        files = data.get("files", [])
        if not isinstance(files, list):
            raise ConfigValidationError("index.toml 的 files 必须为数组")
        return cls(
            hash_format=hash_format,
            files=[IndexEntry.from_dict(entry) for entry in files],
        )

    @property
    def metafiles(self) -> List[IndexEntry]:
        """标记为 metafile 的条目"""
        return [entry for entry in self.files if entry.metafile]
