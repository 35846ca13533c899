"""Employee service - Host responses to visitors and personal preferences"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import (
    RESPONSE_ACCEPTED,
    RESPONSE_DECLINED,
    RESPONSE_PENDING,
    ROLE_ADMIN,
    ROLE_RECEPTIONIST,
    Staff,
    Visitor,
)
from ...security_utils import verify_action_token
from ...services.notification_service import notify_staff_members
from ...shared.validators import utcnow
from ..notification.repository import NotificationRepository
from ..organization.repository import OrganizationRepository
from ..staff.repository import StaffRepository
from ..staff.service import require_staff
from ..visitor.repository import VisitorRepository
from .schemas import PreferencesInput, RespondResult

logger = logging.getLogger(__name__)

ACTION_STATUS = {"accept": RESPONSE_ACCEPTED, "decline": RESPONSE_DECLINED}


class EmployeeService:
    def __init__(self, db: Session):
        self.db = db
        self.visitors = VisitorRepository()

    def respond_to_visitor(self, token: str, action: str, note: Optional[str]) -> RespondResult:
        """Accept/decline from the signed email link"""
        payload = verify_action_token(token, action)
        if payload is None:
            raise HTTPException(status_code=400, detail="Invalid or expired response link")

        visitor = self.visitors.get_by_id(self.db, payload["visitorId"])
        if not visitor:
            raise HTTPException(status_code=404, detail="Visitor not found")
        staff = StaffRepository.get_by_id(self.db, payload["staffId"])
        if not staff:
            raise HTTPException(status_code=404, detail="Staff member not found")
        if visitor.host_staff_id is not None and visitor.host_staff_id != staff.id:
            raise HTTPException(status_code=403, detail="This visitor is not waiting for you")

        return self._respond(visitor, staff, action, note)

    def respond_from_dashboard(
        self, user_id: Optional[str], visitor_id: int, action: str, note: Optional[str]
    ) -> RespondResult:
        staff = require_staff(self.db, user_id)
        visitor = self.visitors.get_by_id(self.db, visitor_id)
        if not visitor:
            raise HTTPException(status_code=404, detail="Visitor not found")
        if visitor.whom_to_see != staff.full_name or visitor.organization_id != staff.organization_id:
            raise HTTPException(status_code=403, detail="This visitor is not waiting for you")
        return self._respond(visitor, staff, action, note)

    @staticmethod
    def _already_responded(visitor: Visitor, action: str) -> RespondResult:
        previous = visitor.host_response_status
        logger.info(f"ℹ️ Visitor {visitor.id} already {previous}, ignoring {action}")
        return RespondResult(
            already_responded=True,
            previous_response=previous,
            status=previous,
            message=f"You already {previous} this meeting.",
        )

    def _respond(self, visitor: Visitor, staff: Staff, action: str, note: Optional[str]) -> RespondResult:
        if visitor.host_response_status and visitor.host_response_status != RESPONSE_PENDING:
            return self._already_responded(visitor, action)

        status = ACTION_STATUS[action]
        # Conditional write; a concurrent response may have landed since the read above
        if not self.visitors.record_host_response(self.db, visitor, status, utcnow(), note):
            return self._already_responded(visitor, action)
        logger.info(f"✅ Staff {staff.id} {status} visitor {visitor.id}")

        self._rewrite_arrival_notification(visitor, staff, status, note)
        self._notify_front_desk(visitor, staff, status)

        return RespondResult(status=status, message=f"You {status} the meeting with {visitor.full_name}.")

    def _rewrite_arrival_notification(self, visitor: Visitor, staff: Staff, status: str, note: Optional[str]) -> None:
        if not staff.clerk_user_id:
            return
        try:
            notification = NotificationRepository.find_related(
                self.db, staff.clerk_user_id, "visitor_arrival", visitor.id
            )
            if not notification:
                return
            suffix = f': "{note}"' if note else ""
            notification.title = f"Visitor {status.capitalize()}"
            notification.message = (
                f"You {status} the meeting with {visitor.full_name} from {visitor.company}{suffix}"
            )
            notification.meta = {**(notification.meta or {}), "responseStatus": status}
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update arrival notification for visitor {visitor.id}: {e}")

    def _notify_front_desk(self, visitor: Visitor, staff: Staff, status: str) -> None:
        organization = OrganizationRepository.get_by_id(self.db, visitor.organization_id)
        if not organization:
            return
        front_desk = StaffRepository.get_with_roles(self.db, organization.id, [ROLE_ADMIN, ROLE_RECEPTIONIST])
        sent = notify_staff_members(
            self.db,
            front_desk,
            organization.clerk_org_id,
            "visitor_response",
            exclude_user_id=staff.clerk_user_id,
            title=f"Visitor {status.capitalize()}",
            message=f"{staff.full_name} {status} the meeting with {visitor.full_name} from {visitor.company}",
            related_id=visitor.id,
            related_type="visitor",
            action_url="/dashboard/visitors",
            metadata={"responseStatus": status, "hostName": staff.full_name, "visitorName": visitor.full_name},
        )
        logger.info(f"🔔 Notified {sent} front desk staff about visitor {visitor.id}")

    def get_pending_visitors(self, user_id: Optional[str]) -> list[Visitor]:
        staff = require_staff(self.db, user_id)
        return self.visitors.pending_for_host(self.db, staff.organization_id, staff.full_name)

    def get_all_visitors(self, user_id: Optional[str]) -> list[Visitor]:
        staff = require_staff(self.db, user_id)
        return self.visitors.for_host(self.db, staff.organization_id, staff.full_name)

    def get_profile(self, user_id: Optional[str]) -> Optional[Staff]:
        return StaffRepository.get_by_clerk_user_id(self.db, user_id)

    def update_preferences(self, user_id: Optional[str], data: PreferencesInput) -> Staff:
        staff = require_staff(self.db, user_id)
        updates = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        return StaffRepository.update(self.db, staff, **updates)
