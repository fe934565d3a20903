"""Pydantic models describing the media-server catalog side."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field


class ImageType(str, Enum):
    PRIMARY = "Primary"
    BANNER = "Banner"
    ART = "Art"


class SeriesStatus(str, Enum):
    CONTINUING = "Continuing"
    ENDED = "Ended"


class ItemLookupInfo(BaseModel):
    """Search info handed over by the host for an item being scanned."""

    name: str | None = None
    path: str | None = None
    provider_ids: dict[str, str] = Field(default_factory=dict)


class CatalogItem(BaseModel):
    """An item the host already resolved, with its provider ids bound."""

    name: str | None = None
    provider_ids: dict[str, str] = Field(default_factory=dict)

    def get_provider_id(self, provider: str) -> str | None:
        return self.provider_ids.get(provider) or None


class CatalogEntity(BaseModel):
    name: str | None = None
    overview: str | None = None
    premiere_date: datetime | None = None
    community_rating: float | None = None
    provider_ids: dict[str, str] = Field(default_factory=dict)

    def set_provider_id(self, provider: str, value: str) -> None:
        self.provider_ids[provider] = value


class CatalogSeries(CatalogEntity):
    status: SeriesStatus | None = None


class CatalogEpisode(CatalogEntity):
    production_year: int | None = None
    parent_index_number: int | None = None
    index_number: int | None = None
    duration_seconds: int | None = None
    critic_rating: int | None = None
    tags: list[str] = Field(default_factory=list)


class RemoteImage(BaseModel):
    provider_name: str
    type: ImageType
    url: str


EntityT = TypeVar("EntityT", bound=CatalogEntity)


class MetadataResult(BaseModel, Generic[EntityT]):
    """Outcome of a metadata lookup; `item` is only set when found."""

    item: EntityT | None = None
    has_metadata: bool = False
