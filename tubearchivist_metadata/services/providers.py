"""Metadata and image providers the media server calls per catalog item."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import httpx

from tubearchivist_metadata.core.config import Settings
from tubearchivist_metadata.schema.catalog import (
    CatalogEpisode,
    CatalogItem,
    CatalogSeries,
    ImageType,
    ItemLookupInfo,
    MetadataResult,
    RemoteImage,
)
from tubearchivist_metadata.services.archive_client import ArchiveClient
from tubearchivist_metadata.services.identifiers import extract_channel_id, extract_video_id
from tubearchivist_metadata.services.mapping import full_image_url, map_channel, map_video

PROVIDER_NAME = "TubeArchivist"


class MetadataProvider(Protocol):
    """What the host needs from a provider: identity, ordering and the two lookups."""

    name: str
    order: int

    async def resolve_metadata(
        self, info: ItemLookupInfo, *, cancel_event: asyncio.Event | None = None
    ) -> MetadataResult: ...

    async def resolve_images(
        self, item: CatalogItem, *, cancel_event: asyncio.Event | None = None
    ) -> list[RemoteImage]: ...


def _archive_client(
    settings: Settings, http_client: httpx.AsyncClient, log: logging.Logger
) -> ArchiveClient | None:
    if not settings.is_configured:
        return None
    return ArchiveClient(
        http_client,
        settings.tubearchivist_url or "",
        settings.tubearchivist_api_key or "",
        logger=log,
    )


def _image(image_type: ImageType, base_url: str, url: str) -> RemoteImage:
    return RemoteImage(provider_name=PROVIDER_NAME, type=image_type, url=full_image_url(base_url, url))


class SeriesProvider:
    """Resolves channels into catalog series."""

    name = PROVIDER_NAME
    order = 1

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._settings = settings
        self._http_client = http_client
        self._logger = logger or logging.getLogger(__name__)

    async def resolve_metadata(
        self, info: ItemLookupInfo, *, cancel_event: asyncio.Event | None = None
    ) -> MetadataResult[CatalogSeries]:
        result = MetadataResult[CatalogSeries]()

        api = _archive_client(self._settings, self._http_client, self._logger)
        if api is None:
            return result

        channel_id = extract_channel_id(info.provider_ids.get(self.name), info.path)
        if not channel_id:
            return result

        try:
            channel = await api.get_channel(channel_id, cancel_event=cancel_event)
            if channel is not None:
                series = map_channel(channel, self._settings.channel_overview_length)
                series.set_provider_id(self.name, channel_id)
                result.item = series
                result.has_metadata = True
        except Exception:
            self._logger.exception("Error getting metadata for series %s", info.name, extra={"channel_id": channel_id})
            return MetadataResult[CatalogSeries]()

        return result

    async def resolve_images(
        self, item: CatalogItem, *, cancel_event: asyncio.Event | None = None
    ) -> list[RemoteImage]:
        api = _archive_client(self._settings, self._http_client, self._logger)
        if api is None:
            return []

        channel_id = item.get_provider_id(self.name)
        if not channel_id:
            return []

        try:
            channel = await api.get_channel(channel_id, cancel_event=cancel_event)
            if channel is None:
                return []

            images: list[RemoteImage] = []
            if channel.thumb_url:
                images.append(_image(ImageType.PRIMARY, api.base_url, channel.thumb_url))
            if channel.banner_url:
                images.append(_image(ImageType.BANNER, api.base_url, channel.banner_url))
            if channel.tvart_url:
                images.append(_image(ImageType.ART, api.base_url, channel.tvart_url))
            return images
        except Exception:
            self._logger.exception("Error getting images for series %s", item.name, extra={"channel_id": channel_id})
            return []


class EpisodeProvider:
    """Resolves videos into catalog episodes."""

    name = PROVIDER_NAME
    order = 1

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._settings = settings
        self._http_client = http_client
        self._logger = logger or logging.getLogger(__name__)

    async def resolve_metadata(
        self, info: ItemLookupInfo, *, cancel_event: asyncio.Event | None = None
    ) -> MetadataResult[CatalogEpisode]:
        result = MetadataResult[CatalogEpisode]()

        api = _archive_client(self._settings, self._http_client, self._logger)
        if api is None:
            return result

        video_id = extract_video_id(info.provider_ids.get(self.name), info.path)
        if not video_id:
            return result

        try:
            video = await api.get_video(video_id, cancel_event=cancel_event)
            if video is not None:
                episode = map_video(video, self._settings.video_overview_length)
                episode.set_provider_id(self.name, video_id)
                result.item = episode
                result.has_metadata = True
        except Exception:
            self._logger.exception("Error getting metadata for episode %s", info.name, extra={"video_id": video_id})
            return MetadataResult[CatalogEpisode]()

        return result

    async def resolve_images(
        self, item: CatalogItem, *, cancel_event: asyncio.Event | None = None
    ) -> list[RemoteImage]:
        api = _archive_client(self._settings, self._http_client, self._logger)
        if api is None:
            return []

        video_id = item.get_provider_id(self.name)
        if not video_id:
            return []

        try:
            video = await api.get_video(video_id, cancel_event=cancel_event)
            if video is None or not video.thumb_url:
                return []
            return [_image(ImageType.PRIMARY, api.base_url, video.thumb_url)]
        except Exception:
            self._logger.exception("Error getting images for episode %s", item.name, extra={"video_id": video_id})
            return []


def build_providers(
    settings: Settings, http_client: httpx.AsyncClient, *, logger: logging.Logger | None = None
) -> list[MetadataProvider]:
    """Return the series and episode providers in host ordering."""

    providers: list[MetadataProvider] = [
        SeriesProvider(settings, http_client, logger=logger),
        EpisodeProvider(settings, http_client, logger=logger),
    ]
    return sorted(providers, key=lambda provider: provider.order)
