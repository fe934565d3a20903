"""API endpoints passing playback progress and search through to the archive."""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, status

from tubearchivist_metadata.core.config import Settings, get_settings
from tubearchivist_metadata.core.transport import get_http_client
from tubearchivist_metadata.schema.archive import PlaybackProgress, SearchHit
from tubearchivist_metadata.services.archive_client import ArchiveClient

router = APIRouter(tags=["videos"])


def get_archive_client(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> ArchiveClient:
    if not settings.is_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="TubeArchivist URL and API key are not configured",
        )
    return ArchiveClient(http_client, settings.tubearchivist_url or "", settings.tubearchivist_api_key or "")


@router.get("/videos/{video_id}/progress", response_model=PlaybackProgress)
async def get_video_progress(video_id: str, api: ArchiveClient = Depends(get_archive_client)) -> PlaybackProgress:
    progress = await api.get_video_progress(video_id)
    if progress is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Progress not available")
    return progress


@router.post("/videos/{video_id}/progress")
async def update_video_progress(
    video_id: str,
    progress: PlaybackProgress,
    api: ArchiveClient = Depends(get_archive_client),
) -> dict[str, bool]:
    if not progress.video_id:
        progress.video_id = video_id
    updated = await api.set_video_progress(video_id, progress)
    return {"updated": updated}


@router.get("/search", response_model=list[SearchHit])
async def search_archive(
    query: str = Query(..., min_length=1),
    api: ArchiveClient = Depends(get_archive_client),
) -> list[SearchHit]:
    return await api.search(query)
