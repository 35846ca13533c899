"""Receptionist service - Front desk profile of the signed-in user"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...identity import ClerkClient, IdentityProviderError, display_name, primary_email
from ...models import Receptionist
from ..organization.repository import OrganizationRepository
from ..organization.service import require_organization
from ..staff.repository import StaffRepository
from ..staff.service import require_user_id
from .repository import ReceptionistRepository

logger = logging.getLogger(__name__)


class ReceptionistService:
    def __init__(self, db: Session, identity: Optional[ClerkClient] = None):
        self.db = db
        self.identity = identity
        self.repo = ReceptionistRepository()

    async def get_or_create(self, user_id: Optional[str], clerk_org_id: Optional[str]) -> Receptionist:
        user_id = require_user_id(user_id)
        receptionist = self.repo.get_by_clerk_user_id(self.db, user_id)
        if receptionist:
            return receptionist

        try:
            user = await self.identity.get_user(user_id)
        except IdentityProviderError as e:
            logger.error(f"❌ Failed to load user {user_id} for receptionist profile: {e}")
            raise HTTPException(status_code=500, detail="Failed to load user profile") from e

        organization = OrganizationRepository.get_by_clerk_id(self.db, clerk_org_id)
        receptionist = self.repo.upsert(
            self.db,
            clerk_user_id=user_id,
            organization_id=organization.id if organization else None,
            full_name=display_name(user, fallback="Receptionist"),
            email=primary_email(user),
        )
        logger.info(f"✅ Receptionist profile {receptionist.id} created for {user_id}")
        return receptionist

    def get_current(self, user_id: Optional[str]) -> Optional[Receptionist]:
        return self.repo.get_by_clerk_user_id(self.db, require_user_id(user_id))

    def get_staff_list(self, clerk_org_id: Optional[str]) -> list[str]:
        organization = require_organization(self.db, clerk_org_id)
        return StaffRepository.get_active_names(self.db, organization.id)
