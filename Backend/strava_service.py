"""
FitForge Strava Service
OAuth token exchange/refresh, activity fetch and deauthorization.
The mobile app holds the tokens; this module only proxies Strava.
"""
from typing import Optional

from config import settings
from http_client import get_client

STRAVA_TOKEN_URL = "https://www.strava.com/api/v3/oauth/token"
STRAVA_DEAUTHORIZE_URL = "https://www.strava.com/oauth/deauthorize"
STRAVA_ACTIVITIES_URL = "https://www.strava.com/api/v3/athlete/activities"


class StravaNotConfigured(RuntimeError):
    def __init__(self):
        super().__init__("Strava client credentials not configured")


def _require_credentials():
    if not settings.STRAVA_CLIENT_ID or not settings.STRAVA_CLIENT_SECRET:
        raise StravaNotConfigured()


def client_config() -> dict:
    """Public OAuth configuration for the mobile auth flow."""
    if not settings.STRAVA_CLIENT_ID:
        raise StravaNotConfigured()
    return {"clientId": settings.STRAVA_CLIENT_ID}


def _token_request(payload: dict) -> dict:
    _require_credentials()
    response = get_client().post(STRAVA_TOKEN_URL, data={
        "client_id": settings.STRAVA_CLIENT_ID,
        "client_secret": settings.STRAVA_CLIENT_SECRET,
        **payload,
    })
    if response.status_code >= 400:
        print(f"[Strava] Token request failed: {response.status_code} {response.text[:200]}")
    response.raise_for_status()
    return response.json()


def exchange_code(code: str, redirect_uri: Optional[str] = None) -> dict:
    """Exchange an authorization code for access/refresh tokens."""
    payload = {"code": code, "grant_type": "authorization_code"}
    if redirect_uri:
        payload["redirect_uri"] = redirect_uri
    return _token_request(payload)


def refresh_token(refresh: str) -> dict:
    """Get a fresh access token."""
    return _token_request({"refresh_token": refresh, "grant_type": "refresh_token"})


def get_activities(access_token: str, per_page: int = 30, page: int = 1) -> list[dict]:
    """Recent activities of the authenticated athlete."""
    response = get_client().get(
        STRAVA_ACTIVITIES_URL,
        params={"per_page": per_page, "page": page},
        headers={"Authorization": f"Bearer {access_token}"},
    )
    response.raise_for_status()
    return response.json()


def deauthorize(access_token: str):
    """Revoke the app's access for this athlete."""
    response = get_client().post(
        STRAVA_DEAUTHORIZE_URL,
        data={"access_token": access_token},
    )
    response.raise_for_status()
