"""Async client for the TubeArchivist REST API.

Every public call is a single best-effort attempt: HTTP failures are logged
as warnings, any other error is logged with the key being fetched, and the
caller gets ``None`` (or an empty list) back instead of an exception.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar
from urllib.parse import quote

import httpx

from tubearchivist_metadata.schema.archive import (
    ChannelRecord,
    PlaybackProgress,
    SearchHit,
    SearchResponse,
    VideoRecord,
)

T = TypeVar("T")


class ArchiveRequestCancelled(RuntimeError):
    """Raised when the caller's cancel event fires while a request is in flight."""


class ArchiveClient:
    """Thin authenticated accessor over the archive's channel, video and search endpoints."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._http_client = http_client
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._logger = logger or logging.getLogger(__name__)

    @property
    def base_url(self) -> str:
        return self._base_url

    def _resource_url(self, resource: str, key: str, *suffix: str) -> str:
        # Ids are path segments; reserved characters must not leak into the route.
        segments = [resource, quote(key, safe=""), *suffix]
        return f"{self._base_url}/api/{'/'.join(segments)}/"

    async def get_channel(
        self, channel_id: str, *, cancel_event: asyncio.Event | None = None
    ) -> ChannelRecord | None:
        try:
            body = await self._get(self._resource_url("channel", channel_id), cancel_event)
            if body is not None:
                return ChannelRecord.model_validate_json(body)
        except Exception:
            self._logger.exception("Error getting channel %s", channel_id, extra={"channel_id": channel_id})
        return None

    async def get_video(
        self, video_id: str, *, cancel_event: asyncio.Event | None = None
    ) -> VideoRecord | None:
        try:
            body = await self._get(self._resource_url("video", video_id), cancel_event)
            if body is not None:
                return VideoRecord.model_validate_json(body)
        except Exception:
            self._logger.exception("Error getting video %s", video_id, extra={"video_id": video_id})
        return None

    async def get_video_progress(
        self, video_id: str, *, cancel_event: asyncio.Event | None = None
    ) -> PlaybackProgress | None:
        try:
            body = await self._get(self._resource_url("video", video_id, "progress"), cancel_event)
            if body is not None:
                return PlaybackProgress.model_validate_json(body)
        except Exception:
            self._logger.exception("Error getting video progress %s", video_id, extra={"video_id": video_id})
        return None

    async def set_video_progress(
        self,
        video_id: str,
        progress: PlaybackProgress,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> bool:
        """Push playback progress; returns False when the archive did not accept it."""

        try:
            content = progress.model_dump_json(by_alias=True).encode("utf-8")
            return await self._post(self._resource_url("video", video_id, "progress"), content, cancel_event)
        except Exception:
            self._logger.exception("Error updating video progress %s", video_id, extra={"video_id": video_id})
        return False

    async def search(self, query: str, *, cancel_event: asyncio.Event | None = None) -> list[SearchHit]:
        try:
            url = f"{self._base_url}/api/search/?query={quote(query, safe='')}"
            body = await self._get(url, cancel_event)
            if body is not None:
                response = SearchResponse.model_validate_json(body)
                return list(response.results or [])
        except Exception:
            self._logger.exception("Error searching for %s", query, extra={"query": query})
        return []

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Token {self._api_key}"}

    async def _get(self, url: str, cancel_event: asyncio.Event | None) -> bytes | None:
        response = await _cancellable(self._http_client.get(url, headers=self._headers()), cancel_event)
        if response.is_success:
            return response.content

        self._logger.warning(
            "API request failed: %s - %s",
            response.status_code,
            url,
            extra={"status_code": response.status_code, "url": url},
        )
        return None

    async def _post(self, url: str, content: bytes, cancel_event: asyncio.Event | None) -> bool:
        headers = self._headers()
        headers["Content-Type"] = "application/json; charset=utf-8"
        response = await _cancellable(
            self._http_client.post(url, content=content, headers=headers),
            cancel_event,
        )
        if response.is_success:
            return True

        self._logger.warning(
            "API POST request failed: %s - %s",
            response.status_code,
            url,
            extra={"status_code": response.status_code, "url": url},
        )
        return False


async def _cancellable(operation: Awaitable[T], cancel_event: asyncio.Event | None) -> T:
    """Await ``operation`` unless ``cancel_event`` is set first."""

    if cancel_event is None:
        return await operation
    if cancel_event.is_set():
        if asyncio.iscoroutine(operation):
            operation.close()
        raise ArchiveRequestCancelled("request cancelled before it was sent")

    request_task = asyncio.ensure_future(operation)
    cancel_task = asyncio.ensure_future(cancel_event.wait())
    try:
        done, _ = await asyncio.wait({request_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        request_task.cancel()
        raise
    finally:
        cancel_task.cancel()

    if request_task in done:
        return request_task.result()

    request_task.cancel()
    try:
        await request_task
    except asyncio.CancelledError:
        pass
    raise ArchiveRequestCancelled("request cancelled while in flight")
