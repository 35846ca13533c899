"""Notification repository"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Notification
from ...shared.validators import utcnow


class NotificationRepository:
    """Repository for in-app notification database operations"""

    @staticmethod
    def _scoped(db: Session, user_id: str, organization_id: str):
        return db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.organization_id == organization_id,
        )

    @staticmethod
    def list_for_user(
        db: Session, user_id: str, organization_id: str, unread_only: bool = False, limit: int = 50
    ) -> list[Notification]:
        query = NotificationRepository._scoped(db, user_id, organization_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()

    @staticmethod
    def unread_count(db: Session, user_id: str, organization_id: str) -> int:
        return NotificationRepository._scoped(db, user_id, organization_id).filter(Notification.is_read.is_(False)).count()

    @staticmethod
    def get_for_user(db: Session, notification_id: int, user_id: str) -> Optional[Notification]:
        return (
            db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )

    @staticmethod
    def find_related(
        db: Session, user_id: str, notification_type: str, related_id
    ) -> Optional[Notification]:
        return (
            db.query(Notification)
            .filter(
                Notification.user_id == user_id,
                Notification.type == notification_type,
                Notification.related_id == str(related_id),
            )
            .order_by(Notification.id.desc())
            .first()
        )

    @staticmethod
    def mark_read(db: Session, notification: Notification) -> Notification:
        notification.is_read = True
        notification.read_at = utcnow()
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def mark_all_read(db: Session, user_id: str, organization_id: str) -> int:
        count = (
            NotificationRepository._scoped(db, user_id, organization_id)
            .filter(Notification.is_read.is_(False))
            .update({"is_read": True, "read_at": utcnow()}, synchronize_session=False)
        )
        db.commit()
        return count

    @staticmethod
    def delete(db: Session, notification: Notification) -> None:
        db.delete(notification)
        db.commit()

    @staticmethod
    def delete_all_read(db: Session, user_id: str, organization_id: str) -> int:
        count = (
            NotificationRepository._scoped(db, user_id, organization_id)
            .filter(Notification.is_read.is_(True))
            .delete(synchronize_session=False)
        )
        db.commit()
        return count
