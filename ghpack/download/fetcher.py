"""
文件下载与哈希

流式下载 release 文件并计算 SHA1，不写入磁盘。
"""

import hashlib
from typing import Optional

import aiohttp
from loguru import logger

from ghpack.exceptions import DownloadNetworkError

HASH_FORMAT = "sha1"
CHUNK_SIZE = 8192


class ArtifactFetcher:
    """下载文件并计算内容哈希"""

    def __init__(self, session: Optional[aiohttp.ClientSession] = None):
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def fetch_and_hash(self, url: str) -> str:
        """
        下载完整内容并计算哈希

        Args:
            url: 下载地址

        Returns:
            小写十六进制的 SHA1 (40 字符)
        """
        logger.info(f"[下载] {url}")
        digest = hashlib.new(HASH_FORMAT)
        size = 0
        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    raise DownloadNetworkError(
                        f"HTTP {response.status}",
                        context={"url": url, "status": response.status},
                    )

                async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                    digest.update(chunk)
                    size += len(chunk)
        except aiohttp.ClientError as e:
            raise DownloadNetworkError(
                f"下载失败: {e}", context={"url": url}
            ) from e

        logger.debug(f"[下载] 完成 {size / (1024 * 1024):.2f} MB")
        return digest.hexdigest()

    async def close(self):
        """关闭下载器"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
