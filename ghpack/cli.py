"""
CLI 模块

命令行接口实现。
"""

import asyncio

import click
from loguru import logger

from ghpack import __version__
from ghpack.exceptions import GhPackError
from ghpack.logger import setup_logger
from ghpack.orchestrator import PackUpdater
from ghpack.pack import load_pack

DEFAULT_RELEASE_NAME_REGEX = "^.* {mc_version}$"
DEFAULT_FILE_NAME_REGEX = "^.*\\.jar$"


def _non_empty(ctx, param, value: str) -> str:
    if not value or not value.strip():
        raise click.BadParameter("不能为空")
    return value


async def run_update(pack_path: str, dry_run: bool = False):
    """异步运行 update"""
    try:
        pack = await load_pack(pack_path)
        async with PackUpdater(pack, dry_run=dry_run) as updater:
            stats = await updater.run()
    except GhPackError as e:
        logger.error(f"运行失败: {e}")
        raise click.ClickException(str(e))

    logger.success(
        f"完成! 检查 {stats.total} 个模组: {stats.updated} 更新, "
        f"{stats.unchanged} 已是最新, {stats.not_found} 未找到, {stats.failed} 失败"
    )
    return stats


async def run_add(
    pack_path: str,
    repo: str,
    name: str,
    path: str,
    side: str,
    release_name_regex: str,
    file_name_regex: str,
):
    """异步运行 add"""
    try:
        pack = await load_pack(pack_path)
        async with PackUpdater(pack) as updater:
            descriptor = await updater.add(
                repo, name, path, side, release_name_regex, file_name_regex
            )
    except GhPackError as e:
        logger.error(f"添加失败: {e}")
        raise click.ClickException(str(e))

    if descriptor is None:
        raise click.ClickException(f"找不到 {repo} 中匹配的 release 文件")
    return descriptor


@click.group()
@click.option(
    "--pack",
    "pack_path",
    default="pack.toml",
    show_default=True,
    type=click.Path(dir_okay=False),
    help="pack.toml 路径",
)
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, pack_path: str, debug: bool):
    """ghpack - 从 GitHub Release 更新 packwiz 模组"""
    setup_logger(debug=debug)
    ctx.obj = {"pack_path": pack_path}


@main.command()
@click.option("--dry-run", is_flag=True, help="干运行模式（只解析，不写入也不 refresh）")
@click.pass_obj
def update(obj: dict, dry_run: bool):
    """更新所有带 [packwiz_gh_release] 的模组，然后运行 packwiz refresh"""
    asyncio.run(run_update(obj["pack_path"], dry_run))


@main.command()
@click.argument("repo")
@click.argument("name")
@click.argument("path", type=click.Path(dir_okay=False))
@click.option(
    "-s",
    "--side",
    type=click.Choice(["both", "client", "server"]),
    default="both",
    show_default=True,
    help="模组运行端",
)
@click.option(
    "--release-name-regex",
    prompt="Release 名称正则（包含 ^ 和 $）",
    default=DEFAULT_RELEASE_NAME_REGEX,
    callback=_non_empty,
    help="匹配 release 名称的正则，支持 {mc_version} 与 {loader}",
)
@click.option(
    "--file-name-regex",
    prompt="文件名正则（包含 ^ 和 $）",
    default=DEFAULT_FILE_NAME_REGEX,
    callback=_non_empty,
    help="匹配 release 文件名的正则，支持 {mc_version} 与 {loader}",
)
@click.pass_obj
def add(
    obj: dict,
    repo: str,
    name: str,
    path: str,
    side: str,
    release_name_regex: str,
    file_name_regex: str,
):
    """
    添加新模组

    REPO 为 GitHub 仓库，例如 "gnembon/fabric-carpet"；NAME 为模组名称；
    PATH 为生成的 .pw.toml 路径，例如 "mods/carpet.pw.toml"。
    """
    asyncio.run(
        run_add(
            obj["pack_path"],
            repo,
            name,
            path,
            side,
            release_name_regex,
            file_name_regex,
        )
    )


if __name__ == "__main__":
    main()
