"""Episode (video) metadata and image endpoints."""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends

from tubearchivist_metadata.core.config import Settings, get_settings
from tubearchivist_metadata.core.transport import get_http_client
from tubearchivist_metadata.schema.catalog import CatalogEpisode, CatalogItem, ItemLookupInfo, MetadataResult, RemoteImage
from tubearchivist_metadata.services.providers import EpisodeProvider

router = APIRouter(prefix="/episodes", tags=["episodes"])


def get_episode_provider(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> EpisodeProvider:
    return EpisodeProvider(settings, http_client)


@router.post("/metadata", response_model=MetadataResult[CatalogEpisode])
async def resolve_episode_metadata(
    info: ItemLookupInfo,
    provider: EpisodeProvider = Depends(get_episode_provider),
) -> MetadataResult[CatalogEpisode]:
    return await provider.resolve_metadata(info)


@router.post("/images", response_model=list[RemoteImage])
async def resolve_episode_images(
    item: CatalogItem,
    provider: EpisodeProvider = Depends(get_episode_provider),
) -> list[RemoteImage]:
    return await provider.resolve_images(item)
