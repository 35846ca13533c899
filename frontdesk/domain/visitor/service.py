"""Visitor service - Kiosk check-in/out and the admin visitor log"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...email_service import send_visitor_arrival_email
from ...models import RESPONSE_PENDING, Organization, Visitor
from ...services.notification_service import notify_staff
from ...shared.validators import end_of_day, start_of_day, to_naive_utc, utcnow
from ..company.service import CompanyService
from ..organization.repository import OrganizationRepository
from ..organization.service import require_organization
from ..staff.repository import StaffRepository
from .repository import VisitorRepository
from .schemas import VisitorCreate, VisitorExportInput, VisitorExportRow

logger = logging.getLogger(__name__)

ALL_VISITORS_LIMIT = 1000
SEARCH_LIMIT = 10


def visit_duration_minutes(visitor: Visitor) -> Optional[int]:
    if not visitor.check_out_time:
        return None
    return int((visitor.check_out_time - visitor.check_in_time).total_seconds() // 60)


class VisitorService:
    """Service layer for visitor business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = VisitorRepository()

    async def create_visitor(self, data: VisitorCreate) -> Visitor:
        """Check a visitor in and tell their host"""
        host = StaffRepository.get_active_by_name(self.db, data.whom_to_see)
        if not host:
            raise HTTPException(status_code=404, detail=f"Staff member '{data.whom_to_see}' not found")

        visitor = self.repo.create(
            self.db,
            organization_id=host.organization_id,
            full_name=data.full_name,
            company=data.company,
            email=data.email,
            phone=data.phone,
            photo_url=data.photo_url,
            whom_to_see=host.full_name,
            reason_for_visit=data.reason_for_visit,
            host_staff_id=host.id,
            check_in_time=utcnow(),
            host_response_status=RESPONSE_PENDING,
        )
        logger.info(f"✅ Visitor {visitor.id} checked in to see {host.full_name}")

        try:
            CompanyService(self.db).record_usage(host.organization_id, data.company)
        except Exception as e:
            self.db.rollback()
            logger.warning(f"⚠️ Failed to record company usage for '{data.company}': {e}")

        organization = OrganizationRepository.get_by_id(self.db, host.organization_id)
        reason = f": {data.reason_for_visit}" if data.reason_for_visit else ""
        notify_staff(
            self.db,
            host,
            organization.clerk_org_id,
            "visitor_arrival",
            title="New Visitor Check-in",
            message=f"{visitor.full_name} from {visitor.company} has checked in to see you{reason}",
            related_id=visitor.id,
            related_type="visitor",
            action_url="/employee/dashboard",
            metadata={
                "visitorName": visitor.full_name,
                "visitorCompany": visitor.company,
                "visitorEmail": visitor.email,
                "visitorPhone": visitor.phone,
                "reasonForVisit": visitor.reason_for_visit,
                "photoUrl": visitor.photo_url,
            },
        )

        if host.email and host.notify_email and host.notify_on_visitor_arrival:
            await send_visitor_arrival_email(
                to=host.email,
                host_name=host.full_name,
                visitor_id=visitor.id,
                host_staff_id=host.id,
                visitor_name=visitor.full_name,
                visitor_company=visitor.company,
                visitor_email=visitor.email,
                visitor_phone=visitor.phone,
                reason_for_visit=visitor.reason_for_visit,
                check_in_time=visitor.check_in_time.strftime("%b %d, %Y at %I:%M %p UTC"),
            )

        return visitor

    def list_visitors(self, clerk_org_id: Optional[str], filter_by: str) -> list[Visitor]:
        organization = require_organization(self.db, clerk_org_id)
        today = start_of_day(utcnow())
        if filter_by == "today":
            return self.repo.list_for_organization(self.db, organization.id, since=today)
        if filter_by == "week":
            # Weeks start on Sunday
            week_start = today - timedelta(days=(today.weekday() + 1) % 7)
            return self.repo.list_for_organization(self.db, organization.id, since=week_start)
        return self.repo.list_for_organization(self.db, organization.id, limit=ALL_VISITORS_LIMIT)

    def _get_in_org(self, organization: Organization, visitor_id: int) -> Visitor:
        visitor = self.repo.get_in_organization(self.db, visitor_id, organization.id)
        if not visitor:
            raise HTTPException(status_code=404, detail="Visitor not found")
        return visitor

    def get_visitor(self, clerk_org_id: Optional[str], visitor_id: int) -> Visitor:
        organization = require_organization(self.db, clerk_org_id)
        return self._get_in_org(organization, visitor_id)

    def search(self, term: str, clerk_org_id: Optional[str]) -> list[Visitor]:
        term = (term or "").strip()
        if not term:
            return []
        organization_id = None
        if clerk_org_id:
            organization = OrganizationRepository.get_by_clerk_id(self.db, clerk_org_id)
            organization_id = organization.id if organization else None
        return self.repo.search_checked_in(self.db, term, organization_id, SEARCH_LIMIT)

    def _check_out(self, visitor: Visitor) -> Visitor:
        if visitor.check_out_time:
            raise HTTPException(status_code=400, detail="Visitor has already checked out")
        visitor = self.repo.check_out(self.db, visitor, utcnow())
        logger.info(f"👋 Visitor {visitor.id} checked out")
        return visitor

    def checkout_public(self, visitor_id: int) -> Visitor:
        visitor = self.repo.get_by_id(self.db, visitor_id)
        if not visitor:
            raise HTTPException(status_code=404, detail="Visitor not found")
        return self._check_out(visitor)

    def checkout(self, clerk_org_id: Optional[str], visitor_id: int) -> Visitor:
        organization = require_organization(self.db, clerk_org_id)
        return self._check_out(self._get_in_org(organization, visitor_id))

    def export(self, clerk_org_id: Optional[str], data: VisitorExportInput) -> list[VisitorExportRow]:
        organization = require_organization(self.db, clerk_org_id)
        visitors = self.repo.list_for_organization(
            self.db,
            organization.id,
            since=start_of_day(to_naive_utc(data.start_date)) if data.start_date else None,
            until=end_of_day(to_naive_utc(data.end_date)) if data.end_date else None,
        )
        return [
            VisitorExportRow(
                id=v.id,
                full_name=v.full_name,
                company=v.company,
                email=v.email,
                phone=v.phone,
                whom_to_see=v.whom_to_see,
                reason_for_visit=v.reason_for_visit,
                check_in_time=v.check_in_time,
                check_out_time=v.check_out_time,
                duration_minutes=visit_duration_minutes(v),
            )
            for v in visitors
        ]
