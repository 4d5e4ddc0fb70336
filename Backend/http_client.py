"""
FitForge HTTP Client
Shared httpx client for the third-party REST APIs.
"""
import threading
from typing import Optional
import httpx

from config import settings

_client: Optional[httpx.Client] = None
_lock = threading.Lock()


def get_client() -> httpx.Client:
    """Get shared httpx client (singleton, safe across resolver threads)."""
    global _client
    with _lock:
        if _client is None:
            _client = httpx.Client(timeout=settings.HTTP_TIMEOUT_SEC)
        return _client


def close_client():
    """Close the shared client."""
    global _client
    with _lock:
        if _client:
            _client.close()
            _client = None


def rapidapi_headers(host: str) -> dict[str, str]:
    """Headers expected by every RapidAPI endpoint."""
    return {
        "x-rapidapi-host": host,
        "x-rapidapi-key": settings.RAPIDAPI_KEY or "",
    }
