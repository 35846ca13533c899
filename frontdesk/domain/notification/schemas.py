"""Notification schemas"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from ...schemas import CamelModel


class NotificationListInput(CamelModel):
    unread_only: bool = False
    limit: int = Field(default=50, ge=1, le=100)


class NotificationCreate(CamelModel):
    user_id: str
    type: str
    title: str
    message: str
    staff_id: Optional[int] = None
    related_id: Optional[str] = None
    related_type: Optional[str] = None
    action_url: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class NotificationResponse(CamelModel):
    id: int
    type: str
    title: str
    message: str
    related_id: Optional[str] = None
    related_type: Optional[str] = None
    action_url: Optional[str] = None
    # Stored in the "metadata" column, mapped as `meta` on the model
    metadata: Optional[dict[str, Any]] = Field(default=None, validation_alias="meta")
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class CountResponse(CamelModel):
    count: int
