"""Ticket service - IT helpdesk workflow"""

import logging
import uuid
from collections import Counter
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...email_service import (
    send_ticket_assigned_email,
    send_ticket_created_email,
    send_ticket_message_email,
    send_ticket_updated_email,
)
from ...models import ROLE_IT_STAFF, Organization, Staff, Ticket, TicketMessage
from ...services.notification_service import notify_staff, notify_staff_members
from ...shared.validators import utcnow
from ..organization.service import require_organization
from ..staff.repository import StaffRepository
from ..staff.service import is_it_or_admin, require_it_or_admin, require_staff
from .repository import TicketRepository
from .schemas import AddMessageInput, TicketCreate, TicketListInput, TicketMetrics, TicketUpdate

logger = logging.getLogger(__name__)

TICKET_NUMBER_ATTEMPTS = 10
NOTIFICATION_PREVIEW_LENGTH = 100


def truncate(text: str, length: int) -> str:
    return text if len(text) <= length else f"{text[:length]}..."


class TicketService:
    """Service layer for ticket business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TicketRepository()

    def _caller(self, user_id: Optional[str], clerk_org_id: Optional[str]) -> tuple[Staff, Organization]:
        staff = require_staff(self.db, user_id)
        organization = require_organization(self.db, clerk_org_id)
        return staff, organization

    def _get_ticket(self, ticket_id: int, organization: Organization) -> Ticket:
        ticket = self.repo.get_in_organization(self.db, ticket_id, organization.id)
        if not ticket:
            raise HTTPException(status_code=404, detail="Ticket not found")
        return ticket

    @staticmethod
    def _can_view(ticket: Ticket, staff: Staff) -> bool:
        return is_it_or_admin(staff) or staff.id in (ticket.created_by_id, ticket.assigned_to_id)

    def generate_ticket_number(self) -> str:
        """TKT-YYYYMMDD-NNN where NNN follows the day's ticket count"""
        prefix = f"TKT-{utcnow().strftime('%Y%m%d')}-"
        count = self.repo.count_with_prefix(self.db, prefix)
        for attempt in range(TICKET_NUMBER_ATTEMPTS):
            candidate = f"{prefix}{count + 1 + attempt:03d}"
            if not self.repo.number_exists(self.db, candidate):
                return candidate
        logger.warning(f"⚠️ No free sequential ticket number for {prefix}, using a random suffix")
        return f"{prefix}{uuid.uuid4().hex[:6].upper()}"

    async def create_ticket(self, user_id: Optional[str], clerk_org_id: Optional[str], data: TicketCreate) -> Ticket:
        staff, organization = self._caller(user_id, clerk_org_id)

        ticket = self.repo.create(
            self.db,
            ticket_number=self.generate_ticket_number(),
            organization_id=organization.id,
            title=data.title,
            description=data.description,
            priority=data.priority,
            category=data.category,
            status="Open",
            created_by_id=staff.id,
        )
        logger.info(f"✅ Ticket {ticket.ticket_number} created by staff {staff.id}")

        if staff.email:
            await send_ticket_created_email(
                to=staff.email,
                requester_name=staff.full_name,
                ticket_id=ticket.id,
                ticket_number=ticket.ticket_number,
                ticket_title=ticket.title,
                priority=ticket.priority,
                category=ticket.category,
            )

        it_staff = StaffRepository.get_with_roles(self.db, organization.id, [ROLE_IT_STAFF])
        notify_staff_members(
            self.db,
            it_staff,
            organization.clerk_org_id,
            "ticket_created",
            exclude_user_id=staff.clerk_user_id,
            title=f"New Ticket: {ticket.ticket_number}",
            message=f'{staff.full_name} created "{ticket.title}" ({ticket.priority} priority)',
            related_id=ticket.id,
            related_type="ticket",
            action_url=f"/it/tickets/{ticket.id}",
            metadata={"ticketNumber": ticket.ticket_number, "priority": ticket.priority},
        )
        return ticket

    def get_all(self, user_id: Optional[str], clerk_org_id: Optional[str], data: TicketListInput) -> list[Ticket]:
        staff, organization = self._caller(user_id, clerk_org_id)
        require_it_or_admin(staff)
        return self.repo.list_for_organization(
            self.db,
            organization.id,
            status=data.status,
            priority=data.priority,
            assigned_to_id=staff.id if data.assigned_to_me else None,
        )

    def get_my_tickets(self, user_id: Optional[str], clerk_org_id: Optional[str]) -> list[Ticket]:
        staff, organization = self._caller(user_id, clerk_org_id)
        return self.repo.list_by_creator(self.db, organization.id, staff.id)

    def get_ticket(self, user_id: Optional[str], clerk_org_id: Optional[str], ticket_id: int) -> tuple[Ticket, bool]:
        """Returns the ticket and whether the caller may see internal notes"""
        staff, organization = self._caller(user_id, clerk_org_id)
        ticket = self._get_ticket(ticket_id, organization)
        if not self._can_view(ticket, staff):
            raise HTTPException(status_code=403, detail="You do not have access to this ticket")
        return ticket, is_it_or_admin(staff)

    async def update_ticket(self, user_id: Optional[str], clerk_org_id: Optional[str], data: TicketUpdate) -> Ticket:
        staff, organization = self._caller(user_id, clerk_org_id)
        require_it_or_admin(staff)
        ticket = self._get_ticket(data.id, organization)

        old_status = ticket.status
        old_assignee_id = ticket.assigned_to_id
        updates = data.model_dump(exclude_unset=True, exclude={"id"})

        if updates.get("assigned_to_id") is not None:
            assignee = StaffRepository.get_by_id(self.db, updates["assigned_to_id"])
            if not assignee or assignee.organization_id != organization.id:
                raise HTTPException(status_code=400, detail="Assignee not found in this organization")

        new_status = updates.get("status")
        if new_status and new_status != old_status:
            if new_status == "Resolved":
                updates["resolved_at"] = utcnow()
            elif new_status == "Closed":
                updates["closed_at"] = utcnow()

        ticket = self.repo.update(self.db, ticket, **updates)
        logger.info(f"✅ Ticket {ticket.ticket_number} updated by staff {staff.id}")

        if new_status and new_status != old_status:
            await self._announce_status_change(ticket, staff, organization, old_status)
        if ticket.assigned_to_id and ticket.assigned_to_id != old_assignee_id:
            await self._announce_assignment(ticket, staff, organization)
        return ticket

    async def _announce_status_change(self, ticket: Ticket, actor: Staff, organization: Organization, old_status: str):
        creator = ticket.created_by
        if creator.email:
            await send_ticket_updated_email(
                to=creator.email,
                ticket_id=ticket.id,
                ticket_number=ticket.ticket_number,
                ticket_title=ticket.title,
                old_status=old_status,
                new_status=ticket.status,
                updated_by=actor.full_name,
            )
        if creator.clerk_user_id != actor.clerk_user_id:
            notify_staff(
                self.db,
                creator,
                organization.clerk_org_id,
                "ticket_status_changed",
                title=f"Ticket {ticket.ticket_number} is now {ticket.status}",
                message=f'Your ticket "{ticket.title}" moved from {old_status} to {ticket.status}',
                related_id=ticket.id,
                related_type="ticket",
                action_url=f"/employee/tickets/{ticket.id}",
                metadata={"oldStatus": old_status, "newStatus": ticket.status},
            )

    async def _announce_assignment(self, ticket: Ticket, actor: Staff, organization: Organization):
        assignee = ticket.assigned_to
        if assignee.email:
            await send_ticket_assigned_email(
                to=assignee.email,
                ticket_id=ticket.id,
                ticket_number=ticket.ticket_number,
                ticket_title=ticket.title,
            )
        if assignee.clerk_user_id != actor.clerk_user_id:
            notify_staff(
                self.db,
                assignee,
                organization.clerk_org_id,
                "ticket_assigned",
                title=f"Ticket Assigned: {ticket.ticket_number}",
                message=f'{actor.full_name} assigned "{ticket.title}" to you',
                related_id=ticket.id,
                related_type="ticket",
                action_url=f"/it/tickets/{ticket.id}",
            )

    async def add_message(
        self, user_id: Optional[str], clerk_org_id: Optional[str], data: AddMessageInput
    ) -> TicketMessage:
        staff, organization = self._caller(user_id, clerk_org_id)
        ticket = self._get_ticket(data.ticket_id, organization)
        if not self._can_view(ticket, staff):
            raise HTTPException(status_code=403, detail="You do not have access to this ticket")
        if data.is_internal and not is_it_or_admin(staff):
            raise HTTPException(status_code=403, detail="Only IT Staff can post internal notes")

        ticket_message = self.repo.add_message(self.db, ticket, staff.id, data.message, data.is_internal)
        if data.is_internal:
            return ticket_message

        recipients = [s for s in (ticket.created_by, ticket.assigned_to) if s is not None and s.id != staff.id]
        notify_staff_members(
            self.db,
            recipients,
            organization.clerk_org_id,
            "ticket_message",
            exclude_user_id=staff.clerk_user_id,
            title=f"New message on {ticket.ticket_number}",
            message=f"{staff.full_name}: {truncate(data.message, NOTIFICATION_PREVIEW_LENGTH)}",
            related_id=ticket.id,
            related_type="ticket",
            action_url=f"/it/tickets/{ticket.id}",
        )
        for recipient in {r.id: r for r in recipients}.values():
            if recipient.email:
                await send_ticket_message_email(
                    to=recipient.email,
                    ticket_id=ticket.id,
                    ticket_number=ticket.ticket_number,
                    ticket_title=ticket.title,
                    sender_name=staff.full_name,
                    message=data.message,
                )
        return ticket_message

    def get_metrics(self, user_id: Optional[str], clerk_org_id: Optional[str]) -> TicketMetrics:
        staff, organization = self._caller(user_id, clerk_org_id)
        if not is_it_or_admin(staff):
            raise HTTPException(status_code=403, detail="You do not have permission to view ticket metrics.")

        tickets = self.repo.list_for_organization(self.db, organization.id)
        by_status = Counter(t.status for t in tickets)
        open_by_priority = Counter(t.priority for t in tickets if t.status == "Open")

        resolved = [t for t in tickets if t.resolved_at and t.created_at]
        avg_hours = 0
        if resolved:
            total_seconds = sum((t.resolved_at - t.created_at).total_seconds() for t in resolved)
            avg_hours = round(total_seconds / len(resolved) / 3600)

        by_department = Counter((t.created_by.department if t.created_by else None) or "Unknown" for t in tickets)

        return TicketMetrics(
            total_open=by_status["Open"],
            total_in_progress=by_status["In Progress"],
            total_resolved=by_status["Resolved"],
            total_closed=by_status["Closed"],
            critical_open=open_by_priority["Critical"],
            high_open=open_by_priority["High"],
            avg_response_time_hours=avg_hours,
            tickets_by_department=dict(by_department),
        )
