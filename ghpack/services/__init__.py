"""
ghpack 服务层

包含业务逻辑服务：GitHub API 客户端、正则占位符处理、Release 解析。
"""

from ghpack.services.api_client import GitHubClient
from ghpack.services.patterns import compile_pattern, resolve_placeholders
from ghpack.services.release_resolver import ReleaseResolver

__all__ = [
    "GitHubClient",
    "ReleaseResolver",
    "compile_pattern",
    "resolve_placeholders",
]
