"""
日志模块

loguru 输出到 stderr，标准输出留给命令本身。
"""

import os
import sys

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"


def is_debug_env() -> bool:
    return os.environ.get("GHPACK_DEBUG", "0") == "1"


def setup_logger(debug: bool = False, sink=None) -> str:
    """
    设置日志记录器

    Args:
        debug: 是否启用 DEBUG 级别，GHPACK_DEBUG=1 时同样启用
        sink: 输出目标，默认 sys.stderr

    Returns:
        生效的日志级别
    """
    level = "DEBUG" if debug or is_debug_env() else "INFO"

    logger.remove()
    logger.add(
        sink=sink if sink is not None else sys.stderr,
        format=LOG_FORMAT,
        level=level,
        backtrace=debug,
        diagnose=debug,
    )

    logger.debug("DEBUG 模式已启用")
    return level


__all__ = ["logger", "setup_logger"]
