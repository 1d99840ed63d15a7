"""
packwiz 整合包配置

读取 pack.toml 与 index.toml。
"""

import os
from dataclasses import dataclass

from loguru import logger

from ghpack.exceptions import ConfigError, ConfigParseError, ConfigValidationError
from ghpack.models import PackIndex, VersionContext
from ghpack.storage import read_toml

DEFAULT_INDEX_FILE = "index.toml"


@dataclass(frozen=True)
class Pack:
    """已加载的整合包"""

    root: str
    context: VersionContext
    index_file: str

    @property
    def index_path(self) -> str:
        return os.path.join(self.root, self.index_file)

    def resolve_path(self, index_relative: str) -> str:
        """index.toml 中的路径相对于 index 所在目录"""
        return os.path.join(os.path.dirname(self.index_path), index_relative)


async def _load_toml_config(path: str) -> dict:
    if not os.path.exists(path):
        raise ConfigError(f"配置文件不存在: {path}", context={"path": path})
    try:
        return await read_toml(path)
    except ValueError as e:
        raise ConfigParseError(
            f"无法解析 {path}: {e}", context={"path": path}
        ) from e


async def load_pack(pack_path: str = "pack.toml") -> Pack:
    """加载 pack.toml 并构建版本上下文"""
    data = await _load_toml_config(pack_path)
    context = VersionContext.from_versions(data.get("versions"))

    index_file = DEFAULT_INDEX_FILE
    index_cfg = data.get("index")
    if isinstance(index_cfg, dict) and index_cfg.get("file"):
        index_file = index_cfg["file"]
        if not isinstance(index_file, str):
            raise ConfigValidationError("pack.toml 的 index.file 必须为字符串")

    logger.debug(
        f"[配置] Minecraft {context.minecraft}, 加载器 {context.loader.value}, 索引 {index_file}"
    )
    return Pack(
        root=os.path.dirname(os.path.abspath(pack_path)),
        context=context,
        index_file=index_file,
    )


async def load_index(pack: Pack) -> PackIndex:
    """加载 index.toml"""
    return PackIndex.from_dict(await _load_toml_config(pack.index_path))
