"""Meeting service - Scheduling with calendar sync"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Meeting, Staff
from ...services.calendar_service import (
    GOOGLE,
    OUTLOOK,
    CalendarProviderError,
    delete_meeting_from_calendars,
    event_from_meeting,
    get_auth_url,
    is_connected,
    sync_meeting_to_calendars,
    update_meeting_in_calendars,
)
from ...services.notification_service import notify_staff
from ...shared.validators import end_of_day, start_of_day, utcnow
from ..organization.repository import OrganizationRepository
from ..organization.service import require_organization
from ..staff.service import require_staff
from ..visitor.repository import VisitorRepository
from .repository import MeetingRepository
from .schemas import MeetingCreate, MeetingUpdate

logger = logging.getLogger(__name__)

ORG_MEETINGS_LIMIT = 200
TODAYS_MEETINGS_LIMIT = 50
ACTIVE_STATUSES = ["scheduled", "in-progress"]

STATUS_TITLES = {
    "cancelled": ("Meeting Cancelled", "has been cancelled"),
    "completed": ("Meeting Completed", "has been marked as completed"),
    "in-progress": ("Meeting Started", "has started"),
}


class MeetingService:
    """Service layer for meeting business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MeetingRepository()

    def _get_meeting(self, staff: Staff, meeting_id: int) -> Meeting:
        meeting = self.repo.get_by_id(self.db, meeting_id)
        if not meeting:
            raise HTTPException(status_code=404, detail="Meeting not found")
        if meeting.organization_id != staff.organization_id:
            raise HTTPException(status_code=403, detail="Meeting belongs to another organization")
        return meeting

    def _notify_host(self, meeting: Meeting, notification_type: str, title: str, message: str) -> None:
        organization = OrganizationRepository.get_by_id(self.db, meeting.organization_id)
        notify_staff(
            self.db,
            meeting.host,
            organization.clerk_org_id,
            notification_type,
            title=title,
            message=message,
            related_id=meeting.id,
            related_type="meeting",
            action_url="/employee/meetings",
        )

    async def create_meeting(self, user_id: Optional[str], data: MeetingCreate) -> Meeting:
        host = require_staff(self.db, user_id)
        meeting = self.repo.create(
            self.db,
            organization_id=host.organization_id,
            host_id=host.id,
            title=data.title,
            description=data.description,
            start_time=data.start_time,
            end_time=data.end_time,
            location=data.location,
            expected_visitors=data.expected_visitors,
            status="scheduled",
        )
        logger.info(f"✅ Meeting {meeting.id} scheduled by staff {host.id}")

        if is_connected(host, GOOGLE) or is_connected(host, OUTLOOK):
            event_ids = await sync_meeting_to_calendars(self.db, host, event_from_meeting(meeting))
            if event_ids:
                meeting = self.repo.update(
                    self.db,
                    meeting,
                    google_calendar_event_id=event_ids.get(GOOGLE),
                    outlook_calendar_event_id=event_ids.get(OUTLOOK),
                )

        self._notify_host(
            meeting,
            "meeting_scheduled",
            "Meeting Scheduled",
            f'"{meeting.title}" is scheduled for {meeting.start_time.strftime("%b %d at %I:%M %p")}',
        )
        return meeting

    def get_my_meetings(self, user_id: Optional[str], status: Optional[str]) -> list[Meeting]:
        host = require_staff(self.db, user_id)
        return self.repo.list_for_host(self.db, host.id, status)

    def get_all(self, clerk_org_id: Optional[str]) -> list[Meeting]:
        organization = require_organization(self.db, clerk_org_id)
        return self.repo.list_for_organization(self.db, organization.id, ORG_MEETINGS_LIMIT)

    def get_meeting(self, user_id: Optional[str], meeting_id: int) -> Meeting:
        return self._get_meeting(require_staff(self.db, user_id), meeting_id)

    async def update_meeting(self, user_id: Optional[str], data: MeetingUpdate) -> Meeting:
        staff = require_staff(self.db, user_id)
        meeting = self._get_meeting(staff, data.id)
        updates = data.model_dump(exclude_unset=True, exclude={"id"})

        start_time = updates.get("start_time") or meeting.start_time
        end_time = updates.get("end_time") or meeting.end_time
        if end_time <= start_time:
            raise HTTPException(status_code=400, detail="End time must be after start time")

        old_status = meeting.status
        meeting = self.repo.update(self.db, meeting, **updates)
        await update_meeting_in_calendars(self.db, meeting.host, meeting)

        if meeting.status != old_status:
            title, verb = STATUS_TITLES.get(meeting.status, ("Meeting Updated", "has been updated"))
            self._notify_host(meeting, "meeting_updated", title, f'"{meeting.title}" {verb}')
        return meeting

    async def delete_meeting(self, user_id: Optional[str], meeting_id: int) -> None:
        staff = require_staff(self.db, user_id)
        meeting = self._get_meeting(staff, meeting_id)
        await delete_meeting_from_calendars(self.db, meeting.host, meeting)
        self.repo.delete(self.db, meeting)
        logger.info(f"🗑️ Meeting {meeting_id} deleted")

    def link_visitor(self, user_id: Optional[str], meeting_id: int, visitor_id: int) -> Meeting:
        staff = require_staff(self.db, user_id)
        meeting = self._get_meeting(staff, meeting_id)
        visitor = VisitorRepository.get_in_organization(self.db, visitor_id, meeting.organization_id)
        if not visitor:
            raise HTTPException(status_code=404, detail="Visitor not found")
        visitor.meeting_id = meeting.id
        return self.repo.update(self.db, meeting, status="in-progress")

    def get_todays_meetings(self, clerk_org_id: Optional[str]) -> list[Meeting]:
        organization = require_organization(self.db, clerk_org_id)
        now = utcnow()
        return self.repo.list_between(
            self.db, organization.id, start_of_day(now), end_of_day(now), ACTIVE_STATUSES, TODAYS_MEETINGS_LIMIT
        )

    def get_calendar_status(self, user_id: Optional[str]) -> dict:
        staff = require_staff(self.db, user_id)
        return {
            "google": bool(staff.google_calendar_connected),
            "outlook": bool(staff.outlook_calendar_connected),
            "custom": bool(staff.custom_calendar_url),
        }

    def get_calendar_auth_url(self, user_id: Optional[str], provider: str) -> str:
        staff = require_staff(self.db, user_id)
        try:
            return get_auth_url(provider, staff.id)
        except CalendarProviderError as e:
            logger.error(f"❌ Cannot build {provider} auth URL: {e}")
            raise HTTPException(status_code=500, detail=str(e)) from e
