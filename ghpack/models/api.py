"""
API 数据模型

定义 GitHub Release 相关的数据类。
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class Asset:
    """Release 附带的单个文件"""

    name: str
    browser_download_url: str

    @classmethod
    def from_github(cls, data: dict) -> "Asset":
        return cls(
            name=data.get("name", ""),
            browser_download_url=data.get("browser_download_url", ""),
        )


@dataclass
class Release:
    """
    GitHub Release。

    name 在 API 中可能为 null，此时记为空字符串。
    """

    id: int
    name: str
    assets: List[Asset] = field(default_factory=list)

    @classmethod
    def from_github(cls, data: dict) -> "Release":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            assets=[Asset.from_github(asset) for asset in data.get("assets", [])],
        )


@dataclass
class ResolvedAsset:
    """解析并下载后的目标文件"""

    filename: str
    url: str
    hash_format: str
    hash: str
