"""
描述文件读写

读取与校验 .pw.toml，整体覆盖写回。
"""

import os
from typing import Any, Dict

import aiofiles
import aiofiles.os
import toml

from ghpack.exceptions import DescriptorValidationError
from ghpack.models import SOURCE_KEY, ModDescriptor


async def read_toml(path: str) -> Dict[str, Any]:
    """
    读取 TOML 文件

    非 UTF-8 内容抛出 UnicodeDecodeError，语法错误抛出 toml.TomlDecodeError，
    二者都是 ValueError。
    """
    async with aiofiles.open(path, "r", encoding="utf-8") as f:
        return toml.loads(await f.read())


def has_release_source(data: Dict[str, Any]) -> bool:
    """是否包含 [packwiz_gh_release] 表"""
    return SOURCE_KEY in data


def parse_descriptor(data: Dict[str, Any], path: str = "") -> ModDescriptor:
    try:
        return ModDescriptor.from_dict(data)
    except DescriptorValidationError as e:
        if path:
            e.context["path"] = path
        raise


async def load_descriptor(path: str) -> ModDescriptor:
    """读取并校验描述文件"""
    try:
        data = await read_toml(path)
    except ValueError as e:
        raise DescriptorValidationError(
            f"无法解析 {path}: {e}", context={"path": path}
        ) from e
    return parse_descriptor(data, path)


def dump_descriptor(descriptor: ModDescriptor) -> str:
    """
    序列化描述文件

    toml 库对部分转义（如正则中的 \\x）输出的内容无法再被解析，
    因此输出后重新解析，结果不一致时拒绝写入。
    """
    data = descriptor.to_dict()
    content = toml.dumps(data)
    try:
        reparsed = toml.loads(content)
    except toml.TomlDecodeError as e:
        raise DescriptorValidationError(
            f"{descriptor.name} 无法序列化为合法的 TOML: {e}",
            context={"name": descriptor.name},
        ) from e
    if reparsed != data:
        raise DescriptorValidationError(
            f"{descriptor.name} 序列化后内容不一致",
            context={"name": descriptor.name},
        )
    return content


async def write_descriptor(path: str, descriptor: ModDescriptor) -> None:
    """
    整体覆盖写入描述文件

    先写入同目录临时文件再替换，避免留下写了一半的文件。
    """
    content = dump_descriptor(descriptor)
    directory = os.path.dirname(path)
    if directory:
        await aiofiles.os.makedirs(directory, exist_ok=True)

    tmp_path = f"{path}.tmp"
    try:
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(content)
        await aiofiles.os.replace(tmp_path, path)
    except OSError:
        if await aiofiles.os.path.exists(tmp_path):
            await aiofiles.os.remove(tmp_path)
        raise
