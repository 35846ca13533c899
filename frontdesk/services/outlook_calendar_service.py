"""
Outlook Calendar Service
Microsoft identity platform OAuth and Graph calendar events
"""

import logging
import time
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from ..config import OUTLOOK_CLIENT_ID, OUTLOOK_CLIENT_SECRET, OUTLOOK_REDIRECT_URI
from .google_calendar_service import CalendarProviderError

logger = logging.getLogger(__name__)

MICROSOFT_AUTHORITY = "https://login.microsoftonline.com/common"
OUTLOOK_AUTH_URL = f"{MICROSOFT_AUTHORITY}/oauth2/v2.0/authorize"
OUTLOOK_TOKEN_URL = f"{MICROSOFT_AUTHORITY}/oauth2/v2.0/token"
GRAPH_API = "https://graph.microsoft.com/v1.0"
OUTLOOK_SCOPES = [
    "https://graph.microsoft.com/Calendars.ReadWrite",
    "https://graph.microsoft.com/User.Read",
    "offline_access",
]
REMINDER_MINUTES = 15


def _require_credentials() -> None:
    if not OUTLOOK_CLIENT_ID or not OUTLOOK_CLIENT_SECRET:
        raise CalendarProviderError("Outlook OAuth credentials not configured")


def get_outlook_auth_url(staff_id: int) -> str:
    _require_credentials()
    params = {
        "client_id": OUTLOOK_CLIENT_ID,
        "redirect_uri": OUTLOOK_REDIRECT_URI,
        "response_type": "code",
        "response_mode": "query",
        "scope": " ".join(OUTLOOK_SCOPES),
        "prompt": "consent",
        "state": str(staff_id),
    }
    return f"{OUTLOOK_AUTH_URL}?{urlencode(params)}"


async def _token_request(data: dict) -> dict:
    async with httpx.AsyncClient(timeout=15.0) as client:
        response = await client.post(
            OUTLOOK_TOKEN_URL,
            data={
                "client_id": OUTLOOK_CLIENT_ID,
                "client_secret": OUTLOOK_CLIENT_SECRET,
                "scope": " ".join(OUTLOOK_SCOPES),
                **data,
            },
        )
    if response.status_code != 200:
        logger.error(f"❌ Microsoft token request failed: {response.text}")
        raise CalendarProviderError("Failed to acquire access token from Microsoft")
    tokens = response.json()
    if not tokens.get("access_token"):
        raise CalendarProviderError("Failed to acquire access token from Microsoft")
    return {
        "access_token": tokens["access_token"],
        "refresh_token": tokens.get("refresh_token") or data.get("refresh_token"),
        "expires_at": int(time.time()) + int(tokens.get("expires_in", 3600)),
        "scope": tokens.get("scope", ""),
    }


async def exchange_outlook_code(code: str) -> dict:
    _require_credentials()
    return await _token_request(
        {"code": code, "redirect_uri": OUTLOOK_REDIRECT_URI, "grant_type": "authorization_code"}
    )


async def refresh_outlook_token(token: dict) -> Optional[dict]:
    if not token.get("refresh_token"):
        return None
    try:
        refreshed = await _token_request({"refresh_token": token["refresh_token"], "grant_type": "refresh_token"})
    except CalendarProviderError:
        return None
    logger.info("✅ Outlook token refreshed successfully")
    return refreshed


def _event_body(event) -> dict[str, Any]:
    return {
        "subject": event.title,
        "body": {"contentType": "HTML", "content": event.description or ""},
        "start": {"dateTime": event.start_time.isoformat(), "timeZone": "UTC"},
        "end": {"dateTime": event.end_time.isoformat(), "timeZone": "UTC"},
        "location": {"displayName": event.location or ""},
        "attendees": [
            {"emailAddress": {"address": email, "name": email}, "type": "required"} for email in event.attendees
        ],
        "isReminderOn": True,
        "reminderMinutesBeforeStart": REMINDER_MINUTES,
    }


async def create_outlook_event(access_token: str, event) -> str:
    async with httpx.AsyncClient(timeout=15.0) as client:
        response = await client.post(
            f"{GRAPH_API}/me/calendar/events",
            headers={"Authorization": f"Bearer {access_token}"},
            json=_event_body(event),
        )
    if response.status_code not in (200, 201):
        raise CalendarProviderError(f"Failed to create Outlook event: {response.text}")
    event_id = response.json().get("id", "")
    logger.info(f"✅ Outlook event created: {event_id}")
    return event_id


async def update_outlook_event(access_token: str, event_id: str, event) -> None:
    async with httpx.AsyncClient(timeout=15.0) as client:
        response = await client.patch(
            f"{GRAPH_API}/me/events/{event_id}",
            headers={"Authorization": f"Bearer {access_token}"},
            json=_event_body(event),
        )
    if response.status_code != 200:
        raise CalendarProviderError(f"Failed to update Outlook event: {response.text}")
    logger.info(f"✅ Outlook event updated: {event_id}")


async def delete_outlook_event(access_token: str, event_id: str) -> None:
    async with httpx.AsyncClient(timeout=15.0) as client:
        response = await client.delete(
            f"{GRAPH_API}/me/events/{event_id}",
            headers={"Authorization": f"Bearer {access_token}"},
        )
    if response.status_code not in (204, 404):
        raise CalendarProviderError(f"Failed to delete Outlook event: {response.text}")
    logger.info(f"✅ Outlook event deleted: {event_id}")
