"""
HTTP client factory for the backend API.

A single AsyncClient is shared per process so the session cookie set by the
backend is carried on every later request. The core never reads or attaches
the token itself.
"""

from typing import Optional
import httpx

from .config import get_settings

# Module-level client cache
_client: Optional[httpx.AsyncClient] = None


def create_http_client(
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Build a new client pointed at the backend API.

    Args:
        base_url: API root, defaults to API_BASE_URL from settings
        timeout: Per-request timeout in seconds
        transport: Optional transport override (tests use MockTransport)

    Returns:
        Configured httpx.AsyncClient with its own cookie jar
    """
    settings = get_settings()
    url = base_url or settings.api_base_url
    if not url:
        raise RuntimeError(
            "Backend API configuration missing. Set the API_BASE_URL environment variable."
        )
    return httpx.AsyncClient(
        base_url=url,
        timeout=timeout if timeout is not None else settings.request_timeout,
        transport=transport,
        headers={"Accept": "application/json"},
    )


def get_http_client() -> httpx.AsyncClient:
    """
    Get the shared HTTP client.

    Returns:
        Process-wide httpx.AsyncClient
    """
    global _client

    if _client is None or _client.is_closed:
        _client = create_http_client()

    return _client


async def close_http_client() -> None:
    """Close the shared client if one was created."""
    global _client

    if _client is not None:
        await _client.aclose()
    _client = None


def reset_client_cache() -> None:
    """
    Forget the cached client without closing it.

    Useful for testing or when configuration changes.
    """
    global _client
    _client = None
