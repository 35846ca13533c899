"""
Calendar Integration Service
Provider dispatch, encrypted token storage, and meeting sync for Google and Outlook.
Sync failures are logged; they never fail the meeting operation.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ..models import Meeting, Staff
from ..security_utils import decrypt_secret, encrypt_secret
from . import google_calendar_service as google
from . import outlook_calendar_service as outlook
from .google_calendar_service import CalendarProviderError

logger = logging.getLogger(__name__)

GOOGLE = "google"
OUTLOOK = "outlook"
PROVIDERS = (GOOGLE, OUTLOOK)

# Refresh tokens this many seconds before they expire
EXPIRY_MARGIN = 5 * 60


@dataclass
class CalendarEvent:
    title: str
    start_time: datetime
    end_time: datetime
    description: Optional[str] = None
    location: Optional[str] = None
    attendees: list[str] = field(default_factory=list)


def event_from_meeting(meeting: Meeting) -> CalendarEvent:
    return CalendarEvent(
        title=meeting.title,
        start_time=meeting.start_time,
        end_time=meeting.end_time,
        description=meeting.description,
        location=meeting.location,
        attendees=[v for v in (meeting.expected_visitors or []) if "@" in v],
    )


def get_auth_url(provider: str, staff_id: int) -> str:
    if provider == GOOGLE:
        return google.get_google_auth_url(staff_id)
    if provider == OUTLOOK:
        return outlook.get_outlook_auth_url(staff_id)
    raise CalendarProviderError(f"Unsupported calendar provider: {provider}")


async def exchange_code_for_tokens(provider: str, code: str) -> dict:
    if provider == GOOGLE:
        return await google.exchange_google_code(code)
    if provider == OUTLOOK:
        return await outlook.exchange_outlook_code(code)
    raise CalendarProviderError(f"Unsupported calendar provider: {provider}")


# ============================================================================
# TOKEN STORAGE
# ============================================================================


def is_connected(staff: Staff, provider: str) -> bool:
    return bool(getattr(staff, f"{provider}_calendar_connected", False))


def store_tokens(db: Session, staff: Staff, provider: str, token: dict) -> None:
    """Persist the Fernet-encrypted token JSON and mark the provider connected"""
    setattr(staff, f"{provider}_calendar_token", encrypt_secret(json.dumps(token)))
    if token.get("refresh_token"):
        setattr(staff, f"{provider}_calendar_refresh_token", encrypt_secret(token["refresh_token"]))
    setattr(staff, f"{provider}_calendar_connected", True)
    db.commit()
    db.refresh(staff)


def load_tokens(staff: Staff, provider: str) -> Optional[dict]:
    raw = decrypt_secret(getattr(staff, f"{provider}_calendar_token", None))
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.error(f"❌ Stored {provider} token for staff {staff.id} is not valid JSON")
        return None


def clear_tokens(db: Session, staff: Staff, provider: str) -> None:
    setattr(staff, f"{provider}_calendar_token", None)
    setattr(staff, f"{provider}_calendar_refresh_token", None)
    setattr(staff, f"{provider}_calendar_connected", False)
    db.commit()
    db.refresh(staff)


async def get_valid_access_token(db: Session, staff: Staff, provider: str) -> Optional[str]:
    """
    Get a valid access token, refreshing if necessary
    Returns None if the provider is not connected or refresh fails
    """
    token = load_tokens(staff, provider)
    if not token:
        return None

    if token.get("expires_at", 0) > time.time() + EXPIRY_MARGIN:
        return token.get("access_token")

    logger.info(f"🔄 {provider} calendar token expired for staff {staff.id}, refreshing...")
    refresh = google.refresh_google_token if provider == GOOGLE else outlook.refresh_outlook_token
    refreshed = await refresh(token)
    if not refreshed:
        logger.error(f"❌ Could not refresh {provider} token for staff {staff.id}; reconnect required")
        return None
    store_tokens(db, staff, provider, refreshed)
    return refreshed["access_token"]


# ============================================================================
# MEETING SYNC
# ============================================================================


async def sync_meeting_to_calendars(db: Session, staff: Staff, event: CalendarEvent) -> dict[str, str]:
    """Create the event in every connected calendar. Returns {provider: event_id} for successes."""
    event_ids: dict[str, str] = {}
    for provider in PROVIDERS:
        if not is_connected(staff, provider):
            continue
        try:
            access_token = await get_valid_access_token(db, staff, provider)
            if not access_token:
                continue
            if provider == GOOGLE:
                event_ids[provider] = await google.create_google_event(access_token, event)
            else:
                event_ids[provider] = await outlook.create_outlook_event(access_token, event)
        except Exception as e:
            logger.error(f"❌ Failed to sync meeting to {provider} for staff {staff.id}: {e}")
    return event_ids


async def update_meeting_in_calendars(db: Session, staff: Staff, meeting: Meeting) -> None:
    event = event_from_meeting(meeting)
    for provider, event_id in _linked_events(meeting):
        if not is_connected(staff, provider):
            continue
        try:
            access_token = await get_valid_access_token(db, staff, provider)
            if not access_token:
                continue
            if provider == GOOGLE:
                await google.update_google_event(access_token, event_id, event)
            else:
                await outlook.update_outlook_event(access_token, event_id, event)
        except Exception as e:
            logger.error(f"❌ Failed to update {provider} event {event_id}: {e}")


async def delete_meeting_from_calendars(db: Session, staff: Staff, meeting: Meeting) -> None:
    for provider, event_id in _linked_events(meeting):
        if not is_connected(staff, provider):
            continue
        try:
            access_token = await get_valid_access_token(db, staff, provider)
            if not access_token:
                continue
            if provider == GOOGLE:
                await google.delete_google_event(access_token, event_id)
            else:
                await outlook.delete_outlook_event(access_token, event_id)
        except Exception as e:
            logger.error(f"❌ Failed to delete {provider} event {event_id}: {e}")


def _linked_events(meeting: Meeting) -> list[tuple[str, str]]:
    linked = []
    if meeting.google_calendar_event_id:
        linked.append((GOOGLE, meeting.google_calendar_event_id))
    if meeting.outlook_calendar_event_id:
        linked.append((OUTLOOK, meeting.outlook_calendar_event_id))
    return linked
