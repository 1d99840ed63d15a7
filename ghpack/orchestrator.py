"""
主协调器

整合 GitHub 客户端、Release 解析与描述文件读写，实现 update 与 add 流程。
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from loguru import logger

from ghpack.download import ArtifactFetcher
from ghpack.exceptions import GhPackError, ValidationError
from ghpack.models import Download, IndexEntry, ModDescriptor, ReleaseSource
from ghpack.pack import Pack, load_index
from ghpack.refresh import DEFAULT_REFRESH_COMMAND, run_refresh
from ghpack.services import GitHubClient, ReleaseResolver
from ghpack.storage import (
    has_release_source,
    parse_descriptor,
    read_toml,
    write_descriptor,
)


@dataclass
class UpdateStats:
    """update 统计"""

    total: int = 0
    updated: int = 0
    unchanged: int = 0
    not_found: int = 0
    failed: int = 0


def parse_repo(repo_full: str) -> tuple[str, str]:
    """拆分 owner/repo"""
    parts = repo_full.strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise ValidationError(
            f"仓库格式应为 owner/repo: {repo_full}", context={"repo": repo_full}
        )
    return parts[0], parts[1]


class PackUpdater:
    """整合包更新协调器"""

    def __init__(
        self,
        pack: Pack,
        client: Optional[GitHubClient] = None,
        fetcher: Optional[ArtifactFetcher] = None,
        refresh_command: Sequence[str] = DEFAULT_REFRESH_COMMAND,
        dry_run: bool = False,
    ):
        self.pack = pack
        self.client = client or GitHubClient()
        self.fetcher = fetcher or ArtifactFetcher()
        self.resolver = ReleaseResolver(self.client, self.fetcher, pack.context)
        self.refresh_command = refresh_command
        self.dry_run = dry_run
        self.stats = UpdateStats()

    async def run(self) -> UpdateStats:
        """
        更新所有带 [packwiz_gh_release] 的描述文件，最后运行一次 refresh

        单个描述文件的失败只记录日志；refresh 失败会抛出 RefreshError。
        """
        index = await load_index(self.pack)
        logger.info(f"开始检查 {len(index.metafiles)} 个 metafile...")

        for entry in index.metafiles:
            await self._process_entry(entry)

        if self.dry_run:
            logger.info("[干运行模式] 跳过 refresh")
        else:
            await run_refresh(self.refresh_command, cwd=self.pack.root)

        return self.stats

    async def _process_entry(self, entry: IndexEntry):
        path = self.pack.resolve_path(entry.file)
        try:
            data = await read_toml(path)
        except (OSError, ValueError) as e:
            self.stats.failed += 1
            logger.error(f"[错误] 无法读取 {entry.file}: {e}")
            return

        if not has_release_source(data):
            return

        self.stats.total += 1
        name = data.get("name") if isinstance(data.get("name"), str) else entry.file
        try:
            descriptor = parse_descriptor(data, path)
            await self.update_descriptor(path, descriptor)
        except (GhPackError, OSError) as e:
            self.stats.failed += 1
            logger.error(f"[错误] 更新 {name} 失败: {e}")

    async def update_descriptor(self, path: str, descriptor: ModDescriptor) -> bool:
        """
        解析单个描述文件并在找到新文件时覆盖写入

        Returns:
            是否找到匹配文件
        """
        logger.info(f"[*] 正在检查: {descriptor.name} ({descriptor.source.full_name})")
        resolved = await self.resolver.resolve(descriptor)
        if resolved is None:
            self.stats.not_found += 1
            logger.error(f"无法更新 {descriptor.name}: 找不到匹配的 release 文件")
            return False

        if descriptor.matches(resolved):
            self.stats.unchanged += 1
            logger.info(f"[跳过] {descriptor.name} 已是最新: {resolved.filename}")
            return True

        self.stats.updated += 1
        if self.dry_run:
            logger.info(
                f"[干运行模式] {descriptor.name}: {descriptor.filename or '-'} -> {resolved.filename}"
            )
            return True

        await write_descriptor(path, descriptor.with_resolution(resolved))
        logger.success(
            f"[完成] {descriptor.name}: {descriptor.filename or '-'} -> {resolved.filename}"
        )
        return True

    async def add(
        self,
        repo_full: str,
        name: str,
        path: str,
        side: str,
        release_name_regex: str,
        file_name_regex: str,
    ) -> Optional[ModDescriptor]:
        """
        创建新的描述文件，写入前先完成解析

        Returns:
            写入的描述文件，找不到匹配文件时返回 None 且不写入
        """
        owner, repo = parse_repo(repo_full)
        descriptor = ModDescriptor(
            name=name,
            filename="",
            side=side,
            download=Download(),
            source=ReleaseSource(
                owner=owner,
                repo=repo,
                release_name_regex=release_name_regex,
                file_name_regex=file_name_regex,
            ),
        )

        resolved = await self.resolver.resolve(descriptor)
        if resolved is None:
            logger.error(f"无法添加 {name}: 找不到匹配的 release 文件")
            return None

        descriptor = descriptor.with_resolution(resolved)
        await write_descriptor(path, descriptor)
        logger.success(f"[完成] 已创建 {path} ({resolved.filename})")
        logger.info("运行 packwiz refresh 以将其加入索引")
        return descriptor

    async def close(self):
        await self.client.close()
        await self.fetcher.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
