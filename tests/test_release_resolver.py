import pytest

from ghpack.exceptions import APIError, PatternError
from ghpack.models import ModDescriptor, Release, ReleaseSource
from ghpack.services import ReleaseResolver

from tests.conftest import (
    FakeGitHubClient,
    descriptor_dict,
    make_assets,
    make_releases,
)


def _source(release_re: str, file_re: str) -> ReleaseSource:
    return ReleaseSource(
        owner="owner",
        repo="repo",
        release_name_regex=release_re,
        file_name_regex=file_re,
    )


@pytest.mark.asyncio
async def test_picks_newest_matching_release_and_asset(context, fetcher):
    client = FakeGitHubClient(
        pages=[make_releases("v1.0 1.20", "v0.9 1.20")],
        assets={
            1: make_assets("mod-1.0.jar", "mod-1.0-sources.jar"),
            2: make_assets("mod-0.9.jar"),
        },
    )
    resolver = ReleaseResolver(client, fetcher, context)

    found = await resolver.find_asset(
        _source("^.* 1.20$", "^mod-.*(?<!sources)\\.jar$")
    )

    release, asset = found
    assert release.name == "v1.0 1.20"
    assert asset.name == "mod-1.0.jar"
    assert client.asset_requests == [1]


@pytest.mark.asyncio
async def test_first_matching_asset_in_listing_order(context, fetcher):
    client = FakeGitHubClient(
        pages=[make_releases("v2 1.20.1")],
        assets={1: make_assets("mod-2-sources.jar", "mod-2.jar", "mod-2-dev.jar")},
    )
    resolver = ReleaseResolver(client, fetcher, context)

    _, asset = await resolver.find_asset(_source("^.* {mc_version}$", "^.*\\.jar$"))

    assert asset.name == "mod-2-sources.jar"


@pytest.mark.asyncio
async def test_no_release_name_matches(context, fetcher):
    client = FakeGitHubClient(
        pages=[make_releases("v3 1.19.4", "v2 1.19.2"), make_releases("v1 1.18")],
        assets={1: make_assets("mod.jar")},
    )
    resolver = ReleaseResolver(client, fetcher, context)
    descriptor = ModDescriptor.from_dict(descriptor_dict())
    before = descriptor.to_dict()

    assert await resolver.resolve(descriptor) is None

    assert descriptor.to_dict() == before
    assert client.asset_requests == []
    assert client.pages_requested == 2
    assert fetcher.urls == []


@pytest.mark.asyncio
async def test_matching_release_without_asset_continues_to_older(context, fetcher):
    releases = [
        Release(id=1, name="v4 1.21"),
        Release(id=2, name="v3 1.20.1"),
        Release(id=3, name="v2 1.19"),
        Release(id=4, name="v1 1.20.1"),
    ]
    client = FakeGitHubClient(
        pages=[releases],
        assets={
            2: make_assets("mod-3-sources.jar"),
            4: make_assets("mod-1.jar"),
        },
    )
    resolver = ReleaseResolver(client, fetcher, context)

    release, asset = await resolver.find_asset(
        _source("^.* {mc_version}$", "^mod-\\d+\\.jar$")
    )

    assert release.id == 4
    assert asset.name == "mod-1.jar"
    assert client.asset_requests == [2, 4]


@pytest.mark.asyncio
async def test_stops_paginating_after_match(context, fetcher):
    client = FakeGitHubClient(
        pages=[
            make_releases("v3 1.19"),
            [Release(id=10, name="v2 1.20.1")],
            [Release(id=20, name="v1 1.20.1")],
        ],
        assets={10: make_assets("mod.jar"), 20: make_assets("mod.jar")},
    )
    resolver = ReleaseResolver(client, fetcher, context)

    release, _ = await resolver.find_asset(_source("^.* {mc_version}$", "^mod\\.jar$"))

    assert release.id == 10
    assert client.pages_requested == 2
    assert client.asset_requests == [10]


@pytest.mark.asyncio
async def test_release_without_name_is_empty_string(context, fetcher):
    release = Release.from_github({"id": 7, "name": None})
    client = FakeGitHubClient(pages=[[release]], assets={7: make_assets("a.jar")})
    resolver = ReleaseResolver(client, fetcher, context)

    found = await resolver.find_asset(_source("^$", "\\.jar$"))

    assert found is not None
    assert found[0].name == ""


@pytest.mark.asyncio
async def test_resolve_fetches_only_selected_asset(context, fetcher):
    client = FakeGitHubClient(
        pages=[make_releases("Carpet 1.4.112 1.20.1")],
        assets={1: make_assets("fabric-carpet-1.20.1-1.4.112.jar")},
    )
    resolver = ReleaseResolver(client, fetcher, context)

    resolved = await resolver.resolve(ModDescriptor.from_dict(descriptor_dict()))

    assert resolved.filename == "fabric-carpet-1.20.1-1.4.112.jar"
    assert resolved.url == "https://example.com/dl/fabric-carpet-1.20.1-1.4.112.jar"
    assert resolved.hash_format == "sha1"
    assert len(resolved.hash) == 40
    assert fetcher.urls == [resolved.url]


@pytest.mark.asyncio
async def test_invalid_pattern_fails_before_any_request(context, fetcher):
    client = FakeGitHubClient(pages=[make_releases("v1 1.20.1")])
    resolver = ReleaseResolver(client, fetcher, context)

    with pytest.raises(PatternError):
        await resolver.find_asset(_source("^v(1", ".*"))

    assert client.pages_requested == 0


@pytest.mark.asyncio
async def test_api_error_propagates(context, fetcher):
    client = FakeGitHubClient(pages=[], error=APIError("boom"))
    resolver = ReleaseResolver(client, fetcher, context)

    with pytest.raises(APIError):
        await resolver.resolve(ModDescriptor.from_dict(descriptor_dict()))
