"""
Release 解析服务

在 GitHub Release 列表中查找第一个名称匹配、且包含匹配文件的 release。
"""

from contextlib import aclosing
from typing import Optional

from loguru import logger

from ghpack.download import ArtifactFetcher, HASH_FORMAT
from ghpack.models import (
    Asset,
    ModDescriptor,
    Release,
    ReleaseSource,
    ResolvedAsset,
    VersionContext,
)
from ghpack.services.api_client import GitHubClient
from ghpack.services.patterns import compile_pattern

ASSETS_PER_PAGE = 50


class ReleaseResolver:
    """Release 解析器"""

    def __init__(
        self,
        client: GitHubClient,
        fetcher: ArtifactFetcher,
        context: VersionContext,
        assets_per_page: int = ASSETS_PER_PAGE,
    ):
        self.client = client
        self.fetcher = fetcher
        self.context = context
        self.assets_per_page = assets_per_page

    async def find_asset(
        self, source: ReleaseSource
    ) -> Optional[tuple[Release, Asset]]:
        """
        查找匹配的 release 与文件

        Release 按 API 顺序（从新到旧）遍历。名称匹配但没有匹配文件的
        release 不会终止查找，继续检查更早的 release；第一个匹配的文件
        立即结束查找，不再请求后续分页。

        Returns:
            tuple: (release, asset)，找不到时返回 None
        """
        release_re = compile_pattern(
            source.release_name_regex, self.context, "release_name_regex"
        )
        file_re = compile_pattern(
            source.file_name_regex, self.context, "file_name_regex"
        )

        async with aclosing(
            self.client.iter_releases(source.owner, source.repo)
        ) as releases:
            async for release in releases:
                if not release_re.search(release.name):
                    continue

                logger.debug(f"[解析] release '{release.name}' 名称匹配")
                assets = await self.client.list_release_assets(
                    source.owner,
                    source.repo,
                    release.id,
                    per_page=self.assets_per_page,
                )
                for asset in assets:
                    if file_re.search(asset.name):
                        return release, asset

                logger.debug(
                    f"[解析] release '{release.name}' 中没有匹配的文件，继续查找"
                )

        return None

    async def resolve(self, descriptor: ModDescriptor) -> Optional[ResolvedAsset]:
        """
        解析并下载描述文件对应的最新文件

        只有找到匹配文件后才会下载计算哈希。

        Returns:
            ResolvedAsset 或 None（找不到匹配）
        """
        found = await self.find_asset(descriptor.source)
        if found is None:
            return None

        release, asset = found
        logger.info(
            f"[解析] {descriptor.name}: 选中 release '{release.name}' 的 {asset.name}"
        )
        digest = await self.fetcher.fetch_and_hash(asset.browser_download_url)
        return ResolvedAsset(
            filename=asset.name,
            url=asset.browser_download_url,
            hash_format=HASH_FORMAT,
            hash=digest,
        )
