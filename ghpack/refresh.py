"""
外部 refresh 命令

所有描述文件写入后调用 packwiz refresh 重新计算索引。
"""

import asyncio
from typing import Optional, Sequence

from loguru import logger

from ghpack.exceptions import RefreshError

DEFAULT_REFRESH_COMMAND = ("packwiz", "refresh")


async def run_refresh(
    command: Sequence[str] = DEFAULT_REFRESH_COMMAND,
    cwd: Optional[str] = None,
) -> None:
    """
    运行 refresh 命令，继承当前进程的标准输入输出

    Raises:
        RefreshError: 命令不存在或返回非零退出码
    """
    logger.info(f"[refresh] 运行: {' '.join(command)}")
    try:
        process = await asyncio.create_subprocess_exec(*command, cwd=cwd)
    except FileNotFoundError as e:
        raise RefreshError(
            f"找不到命令: {command[0]}", context={"command": list(command)}
        ) from e

    returncode = await process.wait()
    if returncode != 0:
        raise RefreshError(
            f"{' '.join(command)} 退出码 {returncode}",
            context={"command": list(command), "returncode": returncode},
        )
    logger.success("[refresh] 完成")
