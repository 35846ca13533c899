"""Notification service - Per-user inbox"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Notification
from ...services.notification_service import create_notification
from .repository import NotificationRepository
from .schemas import NotificationCreate, NotificationListInput

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: Session, user_id: Optional[str], org_id: Optional[str]):
        if not user_id:
            raise HTTPException(status_code=401, detail="Not authenticated")
        self.db = db
        self.user_id = user_id
        self.org_id = org_id
        self.repo = NotificationRepository()

    def get_all(self, data: NotificationListInput) -> list[Notification]:
        if not self.org_id:
            return []
        return self.repo.list_for_user(self.db, self.user_id, self.org_id, data.unread_only, data.limit)

    def get_unread_count(self) -> int:
        if not self.org_id:
            return 0
        return self.repo.unread_count(self.db, self.user_id, self.org_id)

    def _get_own(self, notification_id: int) -> Notification:
        notification = self.repo.get_for_user(self.db, notification_id, self.user_id)
        if not notification:
            raise HTTPException(status_code=404, detail="Notification not found")
        return notification

    def mark_as_read(self, notification_id: int) -> Notification:
        return self.repo.mark_read(self.db, self._get_own(notification_id))

    def mark_all_as_read(self) -> int:
        if not self.org_id:
            return 0
        return self.repo.mark_all_read(self.db, self.user_id, self.org_id)

    def delete(self, notification_id: int) -> None:
        self.repo.delete(self.db, self._get_own(notification_id))

    def delete_all_read(self) -> int:
        if not self.org_id:
            return 0
        return self.repo.delete_all_read(self.db, self.user_id, self.org_id)

    def create(self, data: NotificationCreate) -> Notification:
        if not self.org_id:
            raise HTTPException(status_code=400, detail="No organization context")
        notification = create_notification(
            self.db,
            organization_id=self.org_id,
            user_id=data.user_id,
            notification_type=data.type,
            title=data.title,
            message=data.message,
            staff_id=data.staff_id,
            related_id=data.related_id,
            related_type=data.related_type,
            action_url=data.action_url,
            metadata=data.metadata,
        )
        if notification is None:
            raise HTTPException(status_code=500, detail="Failed to create notification")
        return notification
