"""
ghpack 异常体系

每个异常类带有固定错误代码，context 记录出错的路径、字段或 URL。
"""

from typing import Any, Dict, Optional

import aiohttp


class GhPackError(Exception):
    """ghpack 基础异常类"""

    code = "E000"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


# 配置错误：整个运行中止
class ConfigError(GhPackError):
    code = "E100"


class ConfigParseError(ConfigError):
    code = "E101"


class ConfigValidationError(ConfigError):
    code = "E102"


# API 错误：仅当前描述文件失败
class APIError(GhPackError):
    """GitHub API 请求失败"""

    code = "E200"

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        response: Optional[aiohttp.ClientResponse] = None,
    ):
        super().__init__(message, context)
        self.response = response
        if response is not None:
            self.context["status_code"] = response.status
            self.context["url"] = str(response.url)


class APINotFoundError(APIError):
    code = "E404"


class APIRateLimitError(APIError):
    code = "E429"


class APIServerError(APIError):
    code = "E500"


class DownloadError(GhPackError):
    code = "E300"


class DownloadNetworkError(DownloadError):
    code = "E301"


# 描述文件错误：跳过该文件
class ValidationError(GhPackError):
    code = "E500"


class DescriptorValidationError(ValidationError):
    """描述文件结构错误或无法序列化"""

    code = "E501"


class PatternError(ValidationError):
    """正则表达式无法编译"""

    code = "E502"


class RefreshError(GhPackError):
    """外部 refresh 命令失败，整个运行失败"""

    code = "E600"


__all__ = [
    "GhPackError",
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    "APIError",
    "APINotFoundError",
    "APIRateLimitError",
    "APIServerError",
    "DownloadError",
    "DownloadNetworkError",
    "ValidationError",
    "DescriptorValidationError",
    "PatternError",
    "RefreshError",
]
