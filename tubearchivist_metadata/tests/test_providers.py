"""Tests for the series/episode resolution providers."""

from __future__ import annotations

import logging

import httpx
import pytest

from tubearchivist_metadata.core.config import Settings
from tubearchivist_metadata.schema.catalog import CatalogItem, ImageType, ItemLookupInfo, SeriesStatus
from tubearchivist_metadata.services.providers import (
    PROVIDER_NAME,
    EpisodeProvider,
    SeriesProvider,
    build_providers,
)

CHANNEL_ID = "UCuAXFkgsw1L7xaCfnd5JJOw"
VIDEO_ID = "dQw4w9WgXcQ"

CHANNEL_PAYLOAD = {
    "channel_id": CHANNEL_ID,
    "channel_name": "Demo Channel",
    "channel_description": "All about demos.",
    "channel_thumb_url": "/cache/channels/thumb.jpg",
    "channel_banner_url": "/cache/channels/banner.jpg",
    "channel_tvart_url": "https://cdn.example.com/tvart.jpg",
    "channel_last_refresh": 1625356800,
    "channel_subs": 1_000_000,
    "channel_active": True,
}

VIDEO_PAYLOAD = {
    "youtube_id": VIDEO_ID,
    "title": "Demo Video",
    "description": "A demo.",
    "vid_thumb_url": "/cache/videos/thumb.jpg",
    "published": "2021-07-04T00:00:00Z",
    "duration": 212,
    "view_count": 1_000_000,
    "like_count": 80,
    "dislike_count": 20,
    "tags": ["demo"],
}


def _settings(**overrides) -> Settings:
    values = {"tubearchivist_url": "http://host:8000/", "tubearchivist_api_key": "secret"}
    values.update(overrides)
    return Settings(**values)


def _http_client(routes: dict[str, httpx.Response], calls: list[httpx.Request] | None = None) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return routes.get(request.url.path, httpx.Response(404))

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_series_metadata_from_channel_directory() -> None:
    client = _http_client({f"/api/channel/{CHANNEL_ID}/": httpx.Response(200, json=CHANNEL_PAYLOAD)})
    provider = SeriesProvider(_settings(), client)

    result = await provider.resolve_metadata(ItemLookupInfo(name="Demo", path=f"/media/youtube/{CHANNEL_ID}"))

    assert result.has_metadata is True
    series = result.item
    assert series is not None
    assert series.name == "Demo Channel"
    assert series.overview == "All about demos."
    assert series.status is SeriesStatus.CONTINUING
    assert series.community_rating == pytest.approx(6.0)
    assert series.premiere_date is not None and series.premiere_date.year == 2021
    assert series.provider_ids == {PROVIDER_NAME: CHANNEL_ID}


@pytest.mark.asyncio
async def test_series_metadata_uses_bound_provider_id() -> None:
    calls: list[httpx.Request] = []
    client = _http_client({"/api/channel/UCbound/": httpx.Response(200, json={"channel_name": "Bound"})}, calls)
    provider = SeriesProvider(_settings(), client)

    info = ItemLookupInfo(path=f"/media/youtube/{CHANNEL_ID}", provider_ids={PROVIDER_NAME: "UCbound"})
    result = await provider.resolve_metadata(info)

    assert result.has_metadata is True
    assert result.item is not None and result.item.provider_ids == {PROVIDER_NAME: "UCbound"}
    assert [request.url.path for request in calls] == ["/api/channel/UCbound/"]


@pytest.mark.asyncio
async def test_series_metadata_not_found_logs_one_warning(caplog: pytest.LogCaptureFixture) -> None:
    client = _http_client({})
    provider = SeriesProvider(_settings(), client)

    caplog.set_level(logging.WARNING)
    result = await provider.resolve_metadata(ItemLookupInfo(path=f"/media/youtube/{CHANNEL_ID}"))

    assert result.has_metadata is False
    assert result.item is None
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert not [record for record in caplog.records if record.levelno >= logging.ERROR]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "settings_overrides",
    [{"tubearchivist_url": None}, {"tubearchivist_api_key": None}, {"tubearchivist_api_key": "  "}],
)
async def test_metadata_disabled_without_configuration(settings_overrides: dict[str, str | None]) -> None:
    calls: list[httpx.Request] = []
    client = _http_client({}, calls)
    settings = _settings(**settings_overrides)

    series = await SeriesProvider(settings, client).resolve_metadata(ItemLookupInfo(path=f"/m/{CHANNEL_ID}"))
    episode = await EpisodeProvider(settings, client).resolve_metadata(ItemLookupInfo(path=f"/m/{VIDEO_ID}.mp4"))
    images = await EpisodeProvider(settings, client).resolve_images(
        CatalogItem(provider_ids={PROVIDER_NAME: VIDEO_ID})
    )

    assert series.has_metadata is False
    assert episode.has_metadata is False
    assert images == []
    assert calls == []


@pytest.mark.asyncio
async def test_metadata_skipped_when_no_identifier() -> None:
    calls: list[httpx.Request] = []
    client = _http_client({}, calls)

    series = await SeriesProvider(_settings(), client).resolve_metadata(ItemLookupInfo(path="/media/Some Channel"))
    episode = await EpisodeProvider(_settings(), client).resolve_metadata(ItemLookupInfo(path="/media/clip.mp4"))

    assert series.has_metadata is False
    assert episode.has_metadata is False
    assert calls == []


@pytest.mark.asyncio
async def test_episode_metadata_from_filename() -> None:
    client = _http_client({f"/api/video/{VIDEO_ID}/": httpx.Response(200, json=VIDEO_PAYLOAD)})
    provider = EpisodeProvider(_settings(), client)

    result = await provider.resolve_metadata(
        ItemLookupInfo(name="Demo", path=f"/media/youtube/{CHANNEL_ID}/20210704_{VIDEO_ID}.mp4")
    )

    assert result.has_metadata is True
    episode = result.item
    assert episode is not None
    assert episode.name == "Demo Video"
    assert episode.overview == "A demo."
    assert episode.duration_seconds == 212
    assert episode.community_rating == pytest.approx(8.0)
    assert episode.critic_rating == 60
    assert episode.production_year == 2021
    assert episode.parent_index_number == 2021
    assert episode.index_number == 185
    assert episode.tags == ["demo"]
    assert episode.provider_ids == {PROVIDER_NAME: VIDEO_ID}


@pytest.mark.asyncio
async def test_episode_overview_is_truncated_to_configured_length() -> None:
    payload = dict(VIDEO_PAYLOAD, description="word " * 50)
    client = _http_client({f"/api/video/{VIDEO_ID}/": httpx.Response(200, json=payload)})
    provider = EpisodeProvider(_settings(video_overview_length=10), client)

    result = await provider.resolve_metadata(ItemLookupInfo(path=f"/media/{VIDEO_ID}.mp4"))

    assert result.item is not None
    assert result.item.overview == "word word..."


@pytest.mark.asyncio
async def test_episode_metadata_survives_transport_failure(caplog: pytest.LogCaptureFixture) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    provider = EpisodeProvider(_settings(), client)

    caplog.set_level(logging.ERROR)
    result = await provider.resolve_metadata(ItemLookupInfo(path=f"/media/{VIDEO_ID}.mp4"))

    assert result.has_metadata is False
    assert result.item is None
    assert any(VIDEO_ID in record.getMessage() for record in caplog.records)


@pytest.mark.asyncio
async def test_series_images_resolve_relative_and_absolute_urls() -> None:
    client = _http_client({f"/api/channel/{CHANNEL_ID}/": httpx.Response(200, json=CHANNEL_PAYLOAD)})
    provider = SeriesProvider(_settings(), client)

    images = await provider.resolve_images(CatalogItem(name="Demo", provider_ids={PROVIDER_NAME: CHANNEL_ID}))

    assert [(image.type, image.url) for image in images] == [
        (ImageType.PRIMARY, "http://host:8000/cache/channels/thumb.jpg"),
        (ImageType.BANNER, "http://host:8000/cache/channels/banner.jpg"),
        (ImageType.ART, "https://cdn.example.com/tvart.jpg"),
    ]
    assert {image.provider_name for image in images} == {PROVIDER_NAME}


@pytest.mark.asyncio
async def test_series_images_skip_missing_urls() -> None:
    payload = {"channel_id": CHANNEL_ID, "channel_banner_url": "/cache/banner.jpg"}
    client = _http_client({f"/api/channel/{CHANNEL_ID}/": httpx.Response(200, json=payload)})

    images = await SeriesProvider(_settings(), client).resolve_images(
        CatalogItem(provider_ids={PROVIDER_NAME: CHANNEL_ID})
    )

    assert [image.type for image in images] == [ImageType.BANNER]


@pytest.mark.asyncio
async def test_images_require_bound_provider_id() -> None:
    calls: list[httpx.Request] = []
    client = _http_client({}, calls)

    assert await SeriesProvider(_settings(), client).resolve_images(CatalogItem(name=CHANNEL_ID)) == []
    assert await EpisodeProvider(_settings(), client).resolve_images(CatalogItem(name=VIDEO_ID)) == []
    assert calls == []


@pytest.mark.asyncio
async def test_episode_images() -> None:
    client = _http_client({f"/api/video/{VIDEO_ID}/": httpx.Response(200, json=VIDEO_PAYLOAD)})
    provider = EpisodeProvider(_settings(), client)

    images = await provider.resolve_images(CatalogItem(provider_ids={PROVIDER_NAME: VIDEO_ID}))

    assert len(images) == 1
    assert images[0].type is ImageType.PRIMARY
    assert images[0].url == "http://host:8000/cache/videos/thumb.jpg"


@pytest.mark.asyncio
async def test_episode_images_empty_without_thumbnail_or_record() -> None:
    payload = dict(VIDEO_PAYLOAD, vid_thumb_url=None)
    client = _http_client({f"/api/video/{VIDEO_ID}/": httpx.Response(200, json=payload)})
    provider = EpisodeProvider(_settings(), client)

    assert await provider.resolve_images(CatalogItem(provider_ids={PROVIDER_NAME: VIDEO_ID})) == []
    assert await provider.resolve_images(CatalogItem(provider_ids={PROVIDER_NAME: "missingVid1"})) == []


def test_build_providers() -> None:
    providers = build_providers(_settings(), httpx.AsyncClient())

    assert [type(provider) for provider in providers] == [SeriesProvider, EpisodeProvider]
    assert all(provider.name == PROVIDER_NAME and provider.order == 1 for provider in providers)
