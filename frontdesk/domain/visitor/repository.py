"""Visitor repository - Check-in records and their audit log"""

from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import RESPONSE_PENDING, CheckInLog, Visitor

CHECKED_IN = "CHECKED_IN"
CHECKED_OUT = "CHECKED_OUT"


class VisitorRepository:
    """Repository for visitor database operations"""

    @staticmethod
    def create(db: Session, **visitor_data) -> Visitor:
        visitor = Visitor(**visitor_data)
        visitor.check_in_logs.append(CheckInLog(status=CHECKED_IN, timestamp=visitor.check_in_time))
        db.add(visitor)
        db.commit()
        db.refresh(visitor)
        return visitor

    @staticmethod
    def get_by_id(db: Session, visitor_id: int) -> Optional[Visitor]:
        return db.query(Visitor).filter(Visitor.id == visitor_id).first()

    @staticmethod
    def get_in_organization(db: Session, visitor_id: int, organization_id: int) -> Optional[Visitor]:
        return (
            db.query(Visitor)
            .filter(Visitor.id == visitor_id, Visitor.organization_id == organization_id)
            .first()
        )

    @staticmethod
    def list_for_organization(
        db: Session,
        organization_id: int,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> list[Visitor]:
        query = db.query(Visitor).filter(Visitor.organization_id == organization_id)
        if since is not None:
            query = query.filter(Visitor.check_in_time >= since)
        if until is not None:
            query = query.filter(Visitor.check_in_time <= until)
        query = query.order_by(Visitor.check_in_time.desc(), Visitor.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def search_checked_in(db: Session, term: str, organization_id: Optional[int] = None, limit: int = 10) -> list[Visitor]:
        pattern = f"%{term}%"
        query = db.query(Visitor).filter(
            Visitor.check_out_time.is_(None),
            or_(
                Visitor.full_name.ilike(pattern),
                Visitor.email.ilike(pattern),
                Visitor.company.ilike(pattern),
            ),
        )
        if organization_id is not None:
            query = query.filter(Visitor.organization_id == organization_id)
        return query.order_by(Visitor.check_in_time.desc(), Visitor.id.desc()).limit(limit).all()

    @staticmethod
    def for_host(db: Session, organization_id: int, host_name: str, limit: int = 100) -> list[Visitor]:
        return (
            db.query(Visitor)
            .filter(Visitor.organization_id == organization_id, Visitor.whom_to_see == host_name)
            .order_by(Visitor.check_in_time.desc(), Visitor.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def pending_for_host(db: Session, organization_id: int, host_name: str) -> list[Visitor]:
        return (
            db.query(Visitor)
            .filter(
                Visitor.organization_id == organization_id,
                Visitor.whom_to_see == host_name,
                Visitor.host_response_status == RESPONSE_PENDING,
                Visitor.check_out_time.is_(None),
            )
            .order_by(Visitor.check_in_time.desc(), Visitor.id.desc())
            .all()
        )

    @staticmethod
    def check_out(db: Session, visitor: Visitor, when: datetime) -> Visitor:
        visitor.check_out_time = when
        visitor.check_in_logs.append(CheckInLog(status=CHECKED_OUT, timestamp=when))
        db.commit()
        db.refresh(visitor)
        return visitor

    @staticmethod
    def record_host_response(
        db: Session, visitor: Visitor, status: str, when: datetime, note: Optional[str]
    ) -> bool:
        """Store the first response only. Returns False when another response got there first."""
        updated = (
            db.query(Visitor)
            .filter(
                Visitor.id == visitor.id,
                or_(Visitor.host_response_status == RESPONSE_PENDING, Visitor.host_response_status.is_(None)),
            )
            .update(
                {
                    Visitor.host_response_status: status,
                    Visitor.host_response_time: when,
                    Visitor.host_response_note: note,
                },
                synchronize_session=False,
            )
        )
        db.commit()
        db.refresh(visitor)
        return updated == 1
