"""Series (channel) metadata and image endpoints."""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends

from tubearchivist_metadata.core.config import Settings, get_settings
from tubearchivist_metadata.core.transport import get_http_client
from tubearchivist_metadata.schema.catalog import CatalogItem, CatalogSeries, ItemLookupInfo, MetadataResult, RemoteImage
from tubearchivist_metadata.services.providers import SeriesProvider

router = APIRouter(prefix="/series", tags=["series"])


def get_series_provider(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> SeriesProvider:
    return SeriesProvider(settings, http_client)


@router.post("/metadata", response_model=MetadataResult[CatalogSeries])
async def resolve_series_metadata(
    info: ItemLookupInfo,
    provider: SeriesProvider = Depends(get_series_provider),
) -> MetadataResult[CatalogSeries]:
    return await provider.resolve_metadata(info)


@router.post("/images", response_model=list[RemoteImage])
async def resolve_series_images(
    item: CatalogItem,
    provider: SeriesProvider = Depends(get_series_provider),
) -> list[RemoteImage]:
    return await provider.resolve_images(item)
