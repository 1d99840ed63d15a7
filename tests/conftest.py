import hashlib
from pathlib import Path
from typing import Dict, List, Optional

import pytest
import toml
from loguru import logger

from ghpack.models import Asset, ModLoader, Release, VersionContext


class FakeGitHubClient:
    """按页提供 release，记录请求次数"""

    def __init__(
        self,
        pages: List[List[Release]],
        assets: Optional[Dict[int, List[Asset]]] = None,
        error: Optional[Exception] = None,
    ):
        self.pages = pages
        self.assets = assets or {}
        self.error = error
        self.pages_requested = 0
        self.asset_requests: List[int] = []
        self.closed = False

    async def iter_releases(self, owner: str, repo: str, per_page: int = 30):
        if self.error:
            raise self.error
        for page in self.pages:
            self.pages_requested += 1
            for release in page:
                yield release

    async def list_release_assets(
        self, owner: str, repo: str, release_id: int, per_page: int = 50
    ) -> List[Asset]:
        self.asset_requests.append(release_id)
        return list(self.assets.get(release_id, []))

    async def close(self):
        self.closed = True


class FakeFetcher:
    """以 URL 的 SHA1 作为内容哈希"""

    def __init__(self):
        self.urls: List[str] = []
        self.closed = False

    async def fetch_and_hash(self, url: str) -> str:
        self.urls.append(url)
        return hashlib.sha1(url.encode()).hexdigest()

    async def close(self):
        self.closed = True


def make_releases(*names) -> List[Release]:
    return [Release(id=i + 1, name=name) for i, name in enumerate(names)]


def make_assets(*names) -> List[Asset]:
    return [
        Asset(name=name, browser_download_url=f"https://example.com/dl/{name}")
        for name in names
    ]


@pytest.fixture
def context() -> VersionContext:
    return VersionContext(minecraft="1.20.1", loader=ModLoader.FABRIC)


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def log_records():
    """收集 loguru 日志记录"""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


def descriptor_dict(name: str = "Carpet", **source) -> dict:
    data = {
        "name": name,
        "filename": "old.jar",
        "side": "both",
        "download": {
            "url": "https://example.com/dl/old.jar",
            "hash-format": "sha1",
            "hash": "0" * 40,
        },
        "packwiz_gh_release": {
            "owner": "gnembon",
            "repo": "fabric-carpet",
            "release_name_regex": "^.* {mc_version}$",
            "file_name_regex": "^.*\\.jar$",
        },
    }
    data["packwiz_gh_release"].update(source)
    return data


@pytest.fixture
def make_pack(tmp_path: Path):
    """
    在 tmp_path 下生成 pack.toml、index.toml 与描述文件

    files: {相对路径: dict、文本或字节}，全部登记为 metafile。
    """

    def _make(files: Dict[str, object], versions: Optional[dict] = None) -> Path:
        pack = {
            "name": "Test Pack",
            "pack-format": "packwiz:1.1.0",
            "index": {"file": "index.toml", "hash-format": "sha256"},
            "versions": versions or {"minecraft": "1.20.1", "fabric": "0.15.0"},
        }
        (tmp_path / "pack.toml").write_text(toml.dumps(pack), encoding="utf-8")

        entries = []
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                raw = content
            elif isinstance(content, str):
                raw = content.encode("utf-8")
            else:
                raw = toml.dumps(content).encode("utf-8")
            path.write_bytes(raw)
            entries.append(
                {
                    "file": rel,
                    "hash": hashlib.sha256(raw).hexdigest(),
                    "metafile": True,
                }
            )
        index = {"hash-format": "sha256", "files": entries}
        (tmp_path / "index.toml").write_text(toml.dumps(index), encoding="utf-8")
        return tmp_path / "pack.toml"

    return _make
