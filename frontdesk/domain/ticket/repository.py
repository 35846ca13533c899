"""Ticket repository - Helpdesk tickets and their conversation"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Ticket, TicketMessage


class TicketRepository:
    """Repository for ticket database operations"""

    @staticmethod
    def count_with_prefix(db: Session, prefix: str) -> int:
        return db.query(Ticket).filter(Ticket.ticket_number.like(f"{prefix}%")).count()

    @staticmethod
    def number_exists(db: Session, ticket_number: str) -> bool:
        return db.query(Ticket.id).filter(Ticket.ticket_number == ticket_number).first() is not None

    @staticmethod
    def create(db: Session, **ticket_data) -> Ticket:
        ticket = Ticket(**ticket_data)
        db.add(ticket)
        db.commit()
        db.refresh(ticket)
        return ticket

    @staticmethod
    def get_in_organization(db: Session, ticket_id: int, organization_id: int) -> Optional[Ticket]:
        return db.query(Ticket).filter(Ticket.id == ticket_id, Ticket.organization_id == organization_id).first()

    @staticmethod
    def list_for_organization(
        db: Session,
        organization_id: int,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        assigned_to_id: Optional[int] = None,
    ) -> list[Ticket]:
        query = db.query(Ticket).filter(Ticket.organization_id == organization_id)
        if status:
            query = query.filter(Ticket.status == status)
        if priority:
            query = query.filter(Ticket.priority == priority)
        if assigned_to_id is not None:
            query = query.filter(Ticket.assigned_to_id == assigned_to_id)
        return query.order_by(Ticket.created_at.desc(), Ticket.id.desc()).all()

    @staticmethod
    def list_by_creator(db: Session, organization_id: int, staff_id: int) -> list[Ticket]:
        return (
            db.query(Ticket)
            .filter(Ticket.organization_id == organization_id, Ticket.created_by_id == staff_id)
            .order_by(Ticket.created_at.desc(), Ticket.id.desc())
            .all()
        )

    @staticmethod
    def update(db: Session, ticket: Ticket, **updates) -> Ticket:
        for key, value in updates.items():
            if hasattr(ticket, key):
                setattr(ticket, key, value)
        db.commit()
        db.refresh(ticket)
        return ticket

    @staticmethod
    def add_message(db: Session, ticket: Ticket, sender_id: int, message: str, is_internal: bool) -> TicketMessage:
        ticket_message = TicketMessage(ticket_id=ticket.id, sender_id=sender_id, message=message, is_internal=is_internal)
        db.add(ticket_message)
        db.commit()
        db.refresh(ticket_message)
        return ticket_message
