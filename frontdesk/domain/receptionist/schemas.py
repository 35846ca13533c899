"""Receptionist schemas"""

from datetime import datetime
from typing import Optional

from ...schemas import CamelModel


class ReceptionistResponse(CamelModel):
    id: int
    clerk_user_id: str
    organization_id: Optional[int] = None
    full_name: str
    email: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None
