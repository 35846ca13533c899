"""Organization service - Tenant sync and settings"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...identity import ClerkClient, IdentityProviderError
from ...models import Organization
from .repository import OrganizationRepository
from .schemas import OrganizationSettingsInput, OrganizationSyncInput

logger = logging.getLogger(__name__)


def require_organization(db: Session, clerk_org_id: Optional[str]) -> Organization:
    """Resolve the caller's organization or fail with BAD_REQUEST"""
    if not clerk_org_id:
        raise HTTPException(status_code=400, detail="No organization context")
    organization = OrganizationRepository.get_by_clerk_id(db, clerk_org_id)
    if not organization:
        raise HTTPException(
            status_code=400,
            detail="Organization not found in database. Please sync your organization first.",
        )
    return organization


class OrganizationService:
    """Service layer for organization business logic"""

    def __init__(self, db: Session, identity: Optional[ClerkClient] = None):
        self.db = db
        self.identity = identity
        self.repo = OrganizationRepository()

    async def sync_to_db(self, user_id: str) -> dict:
        """Upsert the caller's first organization membership"""
        try:
            memberships = await self.identity.get_user_memberships(user_id)
        except IdentityProviderError as e:
            logger.error(f"❌ Failed to list memberships for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load organizations") from e

        if not memberships:
            raise HTTPException(status_code=404, detail="No organizations found")

        clerk_org = memberships[0].get("organization", {})
        organization = self.repo.upsert(
            self.db,
            clerk_org_id=clerk_org["id"],
            name=clerk_org.get("name") or clerk_org["id"],
            slug=clerk_org.get("slug") or clerk_org["id"],
        )
        logger.info(f"✅ Organization {organization.clerk_org_id} synced for user {user_id}")
        return {"success": True, "organization": organization, "clerkOrgId": organization.clerk_org_id}

    def sync_organization(self, data: OrganizationSyncInput) -> Organization:
        return self.repo.upsert(self.db, data.clerk_org_id, data.name, data.slug)

    def get_current(self, clerk_org_id: Optional[str]) -> Optional[Organization]:
        return self.repo.get_by_clerk_id(self.db, clerk_org_id)

    def update_settings(self, clerk_org_id: Optional[str], data: OrganizationSettingsInput) -> Organization:
        if not clerk_org_id:
            raise HTTPException(status_code=401, detail="No organization context")
        organization = self.repo.get_by_clerk_id(self.db, clerk_org_id)
        if not organization:
            raise HTTPException(status_code=404, detail="Organization not found")
        return self.repo.update(self.db, organization, **data.model_dump(exclude_unset=True))
