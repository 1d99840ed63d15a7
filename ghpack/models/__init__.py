"""
ghpack 数据模型包

包含配置模型、描述文件模型和 API 模型定义。
"""

from ghpack.models.config import (
    ModLoader,
    LOADER_PRIORITY,
    VersionContext,
    IndexEntry,
    PackIndex,
)
from ghpack.models.descriptor import (
    SOURCE_KEY,
    Download,
    ReleaseSource,
    ModDescriptor,
)
from ghpack.models.api import (
    Asset,
    Release,
    ResolvedAsset,
)

__all__ = [
    # 配置模型
    "ModLoader",
    "LOADER_PRIORITY",
    "VersionContext",
    "IndexEntry",
    "PackIndex",
    # 描述文件模型
    "SOURCE_KEY",
    "Download",
    "ReleaseSource",
    "ModDescriptor",
    # API 模型
    "Asset",
    "Release",
    "ResolvedAsset",
]
