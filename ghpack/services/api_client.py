"""
GitHub API 客户端

封装 Release 列表（按 Link 头惰性分页）与 Release 文件列表接口。
"""

import os
from typing import Any, AsyncIterator, List, Optional

import aiohttp
from loguru import logger

from ghpack.models import Asset, Release
from ghpack.exceptions import (
    APIError,
    APINotFoundError,
    APIRateLimitError,
    APIServerError,
)


GITHUB_BASE_URL = "https://api.github.com"
USER_AGENT = "packwiz-gh-release tool"


class GitHubClient:
    """GitHub REST API 客户端"""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        token: Optional[str] = None,
        base_url: str = GITHUB_BASE_URL,
    ):
        self._session = session
        self._owned_session = session is None
        self._token = token if token is not None else os.environ.get("GITHUB_TOKEN")
        self.base_url = base_url.rstrip("/")

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    @property
    def headers(self) -> dict:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    @staticmethod
    def _status_error(response: aiohttp.ClientResponse) -> APIError:
        """根据状态码构造异常"""
        status = response.status
        if status == 404:
            return APINotFoundError("GitHub 资源不存在", response=response)
        if status == 429 or (
            status == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
        ):
            return APIRateLimitError(
                "GitHub API 速率限制，可设置 GITHUB_TOKEN 环境变量", response=response
            )
        if status >= 500:
            return APIServerError(
                f"GitHub 服务器错误 (状态码: {status})", response=response
            )
        return APIError(f"API 请求失败 (状态码: {status})", response=response)

    async def _request(
        self, url: str, params: Optional[dict] = None
    ) -> tuple[Any, Optional[str]]:
        """
        发送 GET 请求

        Returns:
            tuple: (JSON 数据, 下一页 URL 或 None)
        """
        try:
            async with self.session.get(
                url, params=params, headers=self.headers
            ) as response:
                if response.status != 200:
                    raise self._status_error(response)
                data = await response.json()
                next_link = response.links.get("next")
                next_url = str(next_link["url"]) if next_link else None
                return data, next_url
        except aiohttp.ClientError as e:
            raise APIError(
                f"请求 GitHub API 失败: {e}", context={"url": url}
            ) from e

    async def iter_releases(
        self, owner: str, repo: str, per_page: int = 30
    ) -> AsyncIterator[Release]:
        """
        按 API 默认顺序（从新到旧）逐个产出 Release

        只有在上一页消费完后才会请求下一页，调用方停止迭代即停止分页。
        """
        url: Optional[str] = f"{self.base_url}/repos/{owner}/{repo}/releases"
        params: Optional[dict] = {"per_page": per_page}
        page = 1
        while url:
            logger.debug(f"[API] 获取 {owner}/{repo} 的 release 列表，第 {page} 页")
            data, url = await self._request(url, params)
            # 下一页 URL 已包含查询参数
            params = None
            page += 1
            for item in data:
                yield Release.from_github(item)

    async def list_release_assets(
        self, owner: str, repo: str, release_id: int, per_page: int = 50
    ) -> List[Asset]:
        """获取 Release 的文件列表，只取第一页"""
        data, next_url = await self._request(
            f"{self.base_url}/repos/{owner}/{repo}/releases/{release_id}/assets",
            {"per_page": per_page},
        )
        if next_url:
            logger.warning(
                f"[API] {owner}/{repo} 的 release {release_id} 文件数超过 {per_page}，"
                "只检查第一页"
            )
        return [Asset.from_github(item) for item in data]

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
