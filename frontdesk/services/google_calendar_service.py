"""
Google Calendar Service
OAuth code exchange, token refresh, and event create/update/delete
"""

import logging
import time
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from ..config import GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, GOOGLE_REDIRECT_URI

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_REVOKE_URL = "https://oauth2.googleapis.com/revoke"
GOOGLE_CALENDAR_API = "https://www.googleapis.com/calendar/v3"
GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
]


class CalendarProviderError(Exception):
    """Raised when a calendar provider rejects a request"""


def _require_credentials() -> None:
    if not GOOGLE_CLIENT_ID or not GOOGLE_CLIENT_SECRET:
        raise CalendarProviderError("Google Calendar OAuth credentials not configured")


def get_google_auth_url(staff_id: int) -> str:
    _require_credentials()
    params = {
        "client_id": GOOGLE_CLIENT_ID,
        "redirect_uri": GOOGLE_REDIRECT_URI,
        "response_type": "code",
        "scope": " ".join(GOOGLE_SCOPES),
        "access_type": "offline",
        "prompt": "consent",  # Force consent to get refresh token
        "state": str(staff_id),
    }
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


def _token_payload(tokens: dict, refresh_token: Optional[str] = None) -> dict:
    return {
        "access_token": tokens["access_token"],
        "refresh_token": tokens.get("refresh_token") or refresh_token,
        "expires_at": int(time.time()) + int(tokens.get("expires_in", 3600)),
        "scope": tokens.get("scope", ""),
    }


async def exchange_google_code(code: str) -> dict:
    """Exchange an authorization code for tokens"""
    _require_credentials()
    async with httpx.AsyncClient(timeout=15.0) as client:
        response = await client.post(
            GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": GOOGLE_CLIENT_ID,
                "client_secret": GOOGLE_CLIENT_SECRET,
                "redirect_uri": GOOGLE_REDIRECT_URI,
                "grant_type": "authorization_code",
            },
        )
    if response.status_code != 200:
        logger.error(f"❌ Google token exchange failed: {response.text}")
        raise CalendarProviderError("Failed to exchange authorization code")

    tokens = response.json()
    if not tokens.get("access_token"):
        raise CalendarProviderError("No access token received from Google")
    return _token_payload(tokens)


async def refresh_google_token(token: dict) -> Optional[dict]:
    """Returns a refreshed token payload, or None when refresh is impossible"""
    refresh_token = token.get("refresh_token")
    if not refresh_token:
        return None
    async with httpx.AsyncClient(timeout=15.0) as client:
        response = await client.post(
            GOOGLE_TOKEN_URL,
            data={
                "client_id": GOOGLE_CLIENT_ID,
                "client_secret": GOOGLE_CLIENT_SECRET,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            },
        )
    if response.status_code != 200:
        logger.error(f"❌ Google token refresh failed: {response.text}")
        return None
    logger.info("✅ Google Calendar token refreshed successfully")
    return _token_payload(response.json(), refresh_token)


def _event_body(event) -> dict[str, Any]:
    body: dict[str, Any] = {
        "summary": event.title,
        "description": event.description or "",
        "start": {"dateTime": event.start_time.isoformat(), "timeZone": "UTC"},
        "end": {"dateTime": event.end_time.isoformat(), "timeZone": "UTC"},
        "reminders": {"useDefault": False, "overrides": [{"method": "popup", "minutes": 15}]},
    }
    if event.location:
        body["location"] = event.location
    if event.attendees:
        body["attendees"] = [{"email": email} for email in event.attendees]
    return body


async def create_google_event(access_token: str, event) -> str:
    async with httpx.AsyncClient(timeout=15.0) as client:
        response = await client.post(
            f"{GOOGLE_CALENDAR_API}/calendars/primary/events",
            headers={"Authorization": f"Bearer {access_token}"},
            json=_event_body(event),
        )
    if response.status_code not in (200, 201):
        raise CalendarProviderError(f"Failed to create Google event: {response.text}")
    event_id = response.json().get("id")
    logger.info(f"✅ Google Calendar event created: {event_id}")
    return event_id


async def update_google_event(access_token: str, event_id: str, event) -> None:
    async with httpx.AsyncClient(timeout=15.0) as client:
        response = await client.patch(
            f"{GOOGLE_CALENDAR_API}/calendars/primary/events/{event_id}",
            headers={"Authorization": f"Bearer {access_token}"},
            json=_event_body(event),
        )
    if response.status_code != 200:
        raise CalendarProviderError(f"Failed to update Google event: {response.text}")
    logger.info(f"✅ Google Calendar event updated: {event_id}")


async def delete_google_event(access_token: str, event_id: str) -> None:
    async with httpx.AsyncClient(timeout=15.0) as client:
        response = await client.delete(
            f"{GOOGLE_CALENDAR_API}/calendars/primary/events/{event_id}",
            headers={"Authorization": f"Bearer {access_token}"},
        )
    # 410 means the event was already removed on Google's side
    if response.status_code not in (200, 204, 410):
        raise CalendarProviderError(f"Failed to delete Google event: {response.text}")
    logger.info(f"✅ Google Calendar event deleted: {event_id}")


async def revoke_google_token(token: str) -> None:
    """Best-effort revoke; failures are only logged"""
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            await client.post(GOOGLE_REVOKE_URL, params={"token": token})
        logger.info("✅ Google token revoked")
    except httpx.HTTPError as e:
        logger.warning(f"⚠️ Failed to revoke Google token: {e}")
