"""
In-app Notification Service
Creates notification rows for workflow events (visitor arrivals, tickets, meetings).
A failed notification never fails the operation that triggered it.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ..models import Notification, Staff

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    organization_id: str,
    user_id: str,
    notification_type: str,
    title: str,
    message: str,
    staff_id: Optional[int] = None,
    related_id=None,
    related_type: Optional[str] = None,
    action_url: Optional[str] = None,
    metadata: Optional[dict] = None,
) -> Optional[Notification]:
    """
    Insert a single notification.

    Args:
        organization_id: Identity provider organization id (badge filtering)
        user_id: Identity provider user id of the recipient
        notification_type: e.g. visitor_arrival, ticket_assigned, meeting_updated

    Returns:
        The notification, or None if it could not be stored
    """
    try:
        notification = Notification(
            organization_id=organization_id,
            user_id=user_id,
            staff_id=staff_id,
            type=notification_type,
            title=title,
            message=message,
            related_id=str(related_id) if related_id is not None else None,
            related_type=related_type,
            action_url=action_url,
            meta=metadata,
            is_read=False,
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
        logger.info(f"🔔 {notification_type} notification created for user {user_id}")
        return notification
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Failed to create {notification_type} notification for user {user_id}: {e}")
        return None


def notify_staff(db: Session, staff: Staff, organization_id: str, notification_type: str, **kwargs) -> Optional[Notification]:
    """Notify one staff member; staff without an identity account cannot receive notifications"""
    if not staff or not staff.clerk_user_id:
        logger.debug(f"⚠️ Skipping {notification_type} notification: staff has no login")
        return None
    return create_notification(
        db,
        organization_id=organization_id,
        user_id=staff.clerk_user_id,
        notification_type=notification_type,
        staff_id=staff.id,
        **kwargs,
    )


def notify_staff_members(
    db: Session,
    staff_members: Iterable[Staff],
    organization_id: str,
    notification_type: str,
    exclude_user_id: Optional[str] = None,
    **kwargs,
) -> int:
    """Notify several staff members, skipping the actor. Returns how many were created."""
    sent = 0
    seen: set[str] = set()
    for staff in staff_members:
        if not staff.clerk_user_id or staff.clerk_user_id == exclude_user_id or staff.clerk_user_id in seen:
            continue
        seen.add(staff.clerk_user_id)
        if notify_staff(db, staff, organization_id, notification_type, **kwargs):
            sent += 1
    return sent
