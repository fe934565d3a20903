"""Map archive records onto catalog series/episode metadata.

Everything here is pure: records in, catalog entities (or derived values) out.
Fields missing upstream leave the corresponding catalog field unset.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from urllib.parse import urlparse

from tubearchivist_metadata.schema.archive import ChannelRecord, VideoRecord
from tubearchivist_metadata.schema.catalog import CatalogEpisode, CatalogSeries, SeriesStatus

logger = logging.getLogger(__name__)

ELLIPSIS = "..."
WORD_BOUNDARY_RATIO = 0.8
_FALLBACK_DATE_FORMATS = ("%Y%m%d", "%d %b, %Y", "%d %b %Y")


def _clamp(value: float, lower: float, upper: float) -> float:
    return min(upper, max(lower, value))


def truncate_overview(overview: str | None, max_length: int) -> str | None:
    """Cut ``overview`` to ``max_length`` characters and append an ellipsis.

    The cut moves back to the last space only when that keeps at least 80%
    of the allowed length, so long unbroken words are still cut mid-word.
    """

    if not overview or len(overview) <= max_length:
        return overview

    truncated = overview[:max_length]
    last_space = truncated.rfind(" ")
    if last_space >= max_length * WORD_BOUNDARY_RATIO:
        truncated = truncated[:last_space]

    return truncated + ELLIPSIS


def community_rating_from_engagement(likes: int | None, dislikes: int | None) -> float | None:
    """Synthesize a 0-10 rating from like/dislike counters."""

    if likes is not None and dislikes is not None:
        total = likes + dislikes
        if total > 0:
            return likes / total * 10
        return None

    if likes is not None and likes > 0:
        # Only likes known: squeeze into 5-10 so any liked video rates decently.
        return _clamp(math.log10(likes + 1), 5.0, 10.0)

    return None


def critic_rating_from_views(views: int | None) -> int | None:
    if views is None or views <= 0:
        return None
    return round(_clamp(math.log10(views) * 10, 10, 100))


def series_rating_from_subscribers(subscribers: int | None) -> float | None:
    if subscribers is None or subscribers <= 0:
        return None
    return _clamp(math.log10(subscribers), 1.0, 10.0)


def series_status(active: bool) -> SeriesStatus:
    return SeriesStatus.CONTINUING if active else SeriesStatus.ENDED


def parse_published(value: str | None) -> datetime | None:
    """Best-effort parse of the archive's published date."""

    if not value:
        return None
    value = value.strip()
    if not value:
        return None

    iso_value = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(iso_value)
    except ValueError:
        pass

    for fmt in _FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    logger.debug("Failed to parse published date", extra={"value": value})
    return None


def apply_publish_date(episode: CatalogEpisode, published: str | None) -> None:
    """Index an episode by publish date: season is the year, episode the day of year."""

    published_at = parse_published(published)
    if published_at is None:
        return

    episode.premiere_date = published_at
    episode.production_year = published_at.year
    episode.parent_index_number = published_at.year
    episode.index_number = published_at.timetuple().tm_yday


def full_image_url(base_url: str, image_url: str) -> str:
    """Resolve an archive image path against the archive base URL."""

    parsed = urlparse(image_url)
    if parsed.scheme and parsed.netloc:
        return image_url
    return f"{base_url.rstrip('/')}/{image_url.lstrip('/')}"


def map_channel(channel: ChannelRecord, overview_length: int) -> CatalogSeries:
    premiere_date = None
    if channel.last_refresh is not None:
        premiere_date = datetime.fromtimestamp(channel.last_refresh, tz=timezone.utc)

    return CatalogSeries(
        name=channel.name,
        overview=truncate_overview(channel.description, overview_length),
        premiere_date=premiere_date,
        status=series_status(channel.active),
        community_rating=series_rating_from_subscribers(channel.subscribers),
    )


def map_video(video: VideoRecord, overview_length: int) -> CatalogEpisode:
    episode = CatalogEpisode(
        name=video.title,
        overview=truncate_overview(video.description, overview_length),
        duration_seconds=video.duration,
        community_rating=community_rating_from_engagement(video.like_count, video.dislike_count),
        critic_rating=critic_rating_from_views(video.view_count),
    )
    apply_publish_date(episode, video.published)
    if video.tags:
        episode.tags = list(video.tags)
    return episode
