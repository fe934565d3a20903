import httpx
from fastapi import Request

from tubearchivist_metadata.core.config import Settings


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the shared HTTP client used for archive requests."""

    return httpx.AsyncClient(
        timeout=settings.request_timeout_seconds,
        headers={"User-Agent": "tubearchivist-metadata/0.1"},
    )


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """FastAPI dependency returning the application's HTTP client."""

    return request.app.state.http_client
