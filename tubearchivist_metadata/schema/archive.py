"""Pydantic models for TubeArchivist API payloads.

Attributes carry semantic names; the TubeArchivist wire names are accepted
through aliases and used again when a record is serialized back.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ArchiveRecord(BaseModel):
    """Base for archive payloads: unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ChannelRecord(ArchiveRecord):
    id: str = Field("", alias="channel_id")
    name: str | None = Field(None, alias="channel_name")
    description: str | None = Field(None, alias="channel_description")
    thumb_url: str | None = Field(None, alias="channel_thumb_url")
    banner_url: str | None = Field(None, alias="channel_banner_url")
    tvart_url: str | None = Field(None, alias="channel_tvart_url")
    last_refresh: int | None = Field(None, alias="channel_last_refresh")
    subscribers: int | None = Field(None, alias="channel_subs")
    views: int | None = Field(None, alias="channel_views")
    active: bool = Field(False, alias="channel_active")
    subscribed: bool = Field(False, alias="channel_subscribed")


class SubtitleRecord(ArchiveRecord):
    ext: str | None = None
    url: str | None = None
    name: str | None = None
    lang: str | None = None
    source: str | None = None


class VideoRecord(ArchiveRecord):
    id: str = Field("", alias="youtube_id")
    title: str | None = None
    description: str | None = None
    channel: ChannelRecord | None = None
    thumb_url: str | None = Field(None, alias="vid_thumb_url")
    date_downloaded: int | None = None
    published: str | None = None
    duration: int | None = None
    view_count: int | None = None
    like_count: int | None = None
    dislike_count: int | None = None
    comment_count: int | None = None
    tags: list[str] | None = None
    subtitles: list[SubtitleRecord] | None = None
    media_url: str | None = None
    media_size: int | None = None
    last_refresh: int | None = Field(None, alias="vid_last_refresh")

    @property
    def channel_id(self) -> str | None:
        """Identifier of the owning channel, when the payload embeds it."""

        if self.channel is None or not self.channel.id:
            return None
        return self.channel.id


class PlaybackProgress(ArchiveRecord):
    video_id: str = Field("", alias="youtube_id")
    position: int = 0
    watched: bool = False
    date_played: int | None = None


class SearchQuery(ArchiveRecord):
    term: str | None = None
    size: int = 0
    offset: int = Field(0, alias="from")


class SearchHit(ArchiveRecord):
    """A raw search hit; the source document is passed through untouched."""

    source: Any = Field(None, alias="_source")
    index: str | None = Field(None, alias="_index")
    type: str | None = Field(None, alias="_type")
    id: str | None = Field(None, alias="_id")
    score: float | None = Field(None, alias="_score")


class SearchResponse(ArchiveRecord):
    query: SearchQuery | None = None
    results: list[SearchHit] | None = None
