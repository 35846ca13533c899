"""Meeting repository"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Meeting, Visitor


class MeetingRepository:
    """Repository for meeting database operations"""

    @staticmethod
    def create(db: Session, **meeting_data) -> Meeting:
        meeting = Meeting(**meeting_data)
        db.add(meeting)
        db.commit()
        db.refresh(meeting)
        return meeting

    @staticmethod
    def get_by_id(db: Session, meeting_id: int) -> Optional[Meeting]:
        return db.query(Meeting).filter(Meeting.id == meeting_id).first()

    @staticmethod
    def list_for_host(db: Session, host_id: int, status: Optional[str] = None) -> list[Meeting]:
        query = db.query(Meeting).filter(Meeting.host_id == host_id)
        if status:
            query = query.filter(Meeting.status == status)
        return query.order_by(Meeting.start_time.asc()).all()

    @staticmethod
    def list_for_organization(db: Session, organization_id: int, limit: int = 200) -> list[Meeting]:
        return (
            db.query(Meeting)
            .filter(Meeting.organization_id == organization_id)
            .order_by(Meeting.start_time.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def list_between(
        db: Session, organization_id: int, start: datetime, end: datetime, statuses: list[str], limit: int = 50
    ) -> list[Meeting]:
        return (
            db.query(Meeting)
            .filter(
                Meeting.organization_id == organization_id,
                Meeting.start_time >= start,
                Meeting.start_time <= end,
                Meeting.status.in_(statuses),
            )
            .order_by(Meeting.start_time.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def update(db: Session, meeting: Meeting, **updates) -> Meeting:
        for key, value in updates.items():
            if hasattr(meeting, key):
                setattr(meeting, key, value)
        db.commit()
        db.refresh(meeting)
        return meeting

    @staticmethod
    def delete(db: Session, meeting: Meeting) -> None:
        db.query(Visitor).filter(Visitor.meeting_id == meeting.id).update(
            {"meeting_id": None}, synchronize_session=False
        )
        db.delete(meeting)
        db.commit()
