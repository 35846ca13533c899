"""Staff service - Staff directory and login accounts"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...identity import ClerkClient, IdentityProviderError
from ...models import ROLE_ADMIN, ROLE_IT_STAFF, ROLE_RECEPTIONIST, Organization, Staff
from ...security_utils import generate_temporary_password
from ..organization.repository import OrganizationRepository
from ..organization.service import require_organization
from ..receptionist.repository import ReceptionistRepository
from .repository import StaffRepository
from .schemas import StaffCreate, StaffUpdate

logger = logging.getLogger(__name__)

IT_ROLES = (ROLE_IT_STAFF, ROLE_ADMIN)


def require_user_id(user_id: Optional[str]) -> str:
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user_id


def require_staff(db: Session, user_id: Optional[str]) -> Staff:
    """The caller's staff profile or NOT_FOUND"""
    staff = StaffRepository.get_by_clerk_user_id(db, require_user_id(user_id))
    if not staff:
        raise HTTPException(status_code=404, detail="Staff profile not found")
    return staff


def is_it_or_admin(staff: Staff) -> bool:
    return staff.role in IT_ROLES


def require_it_or_admin(staff: Staff) -> Staff:
    if not is_it_or_admin(staff):
        raise HTTPException(status_code=403, detail="Only IT Staff and Admins can perform this action")
    return staff


def split_full_name(full_name: str) -> tuple[str, Optional[str]]:
    first, _, last = full_name.strip().partition(" ")
    return first, (last.strip() or None)


class StaffService:
    """Service layer for staff business logic"""

    def __init__(self, db: Session, identity: Optional[ClerkClient] = None):
        self.db = db
        self.identity = identity
        self.repo = StaffRepository()

    def get_active_staff(self, clerk_org_id: Optional[str]) -> list[str]:
        organization_id = None
        if clerk_org_id:
            organization = OrganizationRepository.get_by_clerk_id(self.db, clerk_org_id)
            if not organization:
                return []
            organization_id = organization.id
        return self.repo.get_active_names(self.db, organization_id)

    def get_all(self, clerk_org_id: Optional[str]) -> list[Staff]:
        organization = require_organization(self.db, clerk_org_id)
        return self.repo.get_for_organization(self.db, organization.id)

    def _get_in_organization(self, staff_id: int, organization: Organization) -> Staff:
        staff = self.repo.get_by_id(self.db, staff_id)
        if not staff:
            raise HTTPException(status_code=404, detail="Staff member not found")
        if staff.organization_id != organization.id:
            raise HTTPException(status_code=403, detail="Staff member belongs to another organization")
        return staff

    async def _create_login(
        self,
        organization: Organization,
        full_name: str,
        email: Optional[str],
        username: Optional[str],
        role: str,
    ) -> tuple[str, str, str]:
        """
        Create the identity account and org membership for a staff member.

        Returns:
            (clerk_user_id, temporary_password, username)
        """
        if not email:
            raise HTTPException(status_code=400, detail="Email is required for staff with login access")

        password = generate_temporary_password()
        username = username or email.split("@")[0]
        first_name, last_name = split_full_name(full_name)

        try:
            user = await self.identity.create_user(
                email=email,
                username=username,
                password=password,
                first_name=first_name,
                last_name=last_name,
            )
        except IdentityProviderError as e:
            logger.error(f"❌ Failed to create login for {email}: {e}")
            raise HTTPException(
                status_code=400 if e.is_client_error else 500,
                detail=f"Failed to create login account: {e.user_message()}",
            ) from e

        user_id = user["id"]
        membership_role = "org:admin" if role == ROLE_ADMIN else "org:member"
        try:
            await self.identity.create_organization_membership(organization.clerk_org_id, user_id, membership_role)
        except IdentityProviderError as e:
            logger.error(f"❌ Failed to add {user_id} to {organization.clerk_org_id}, removing the account: {e}")
            await self._delete_login(user_id)
            raise HTTPException(status_code=500, detail="Failed to add user to organization") from e

        logger.info(f"✅ Created login {user_id} ({membership_role}) for {email}")
        return user_id, password, username

    async def _delete_login(self, user_id: str) -> None:
        try:
            await self.identity.delete_user(user_id)
        except IdentityProviderError as e:
            logger.error(f"❌ Failed to clean up identity user {user_id}: {e}")

    def _sync_receptionist(self, staff: Staff) -> None:
        if staff.role == ROLE_RECEPTIONIST and staff.clerk_user_id:
            ReceptionistRepository.upsert(
                self.db,
                clerk_user_id=staff.clerk_user_id,
                organization_id=staff.organization_id,
                full_name=staff.full_name,
                email=staff.email,
            )

    async def create_staff(self, clerk_org_id: Optional[str], data: StaffCreate) -> dict:
        organization = require_organization(self.db, clerk_org_id)
        logger.info(f"📥 Creating staff member {data.full_name} in org {organization.id}")

        clerk_user_id = None
        password = None
        username = data.username
        if data.can_login:
            clerk_user_id, password, username = await self._create_login(
                organization, data.full_name, data.email, data.username, data.role
            )

        try:
            staff = self.repo.create(
                self.db,
                organization_id=organization.id,
                clerk_user_id=clerk_user_id,
                full_name=data.full_name,
                email=data.email,
                department=data.department,
                title=data.title,
                role=data.role,
                can_login=data.can_login,
                username=username,
                is_active=True,
            )
        except Exception:
            self.db.rollback()
            if clerk_user_id:
                await self._delete_login(clerk_user_id)
            raise

        self._sync_receptionist(staff)
        return {"staff": staff, "temporary_password": password}

    async def update_staff(self, clerk_org_id: Optional[str], data: StaffUpdate) -> dict:
        organization = require_organization(self.db, clerk_org_id)
        staff = self._get_in_organization(data.id, organization)

        updates = data.model_dump(exclude_unset=True, exclude={"id"})
        password = None
        if data.can_login and not staff.clerk_user_id:
            clerk_user_id, password, username = await self._create_login(
                organization,
                updates.get("full_name") or staff.full_name,
                updates.get("email") or staff.email,
                updates.get("username") or staff.username,
                updates.get("role") or staff.role,
            )
            updates["clerk_user_id"] = clerk_user_id
            updates["username"] = username

        staff = self.repo.update(self.db, staff, **updates)
        self._sync_receptionist(staff)
        logger.info(f"✅ Staff member {staff.id} updated")
        return {"staff": staff, "temporary_password": password}

    def delete_staff(self, clerk_org_id: Optional[str], staff_id: int) -> None:
        organization = require_organization(self.db, clerk_org_id)
        staff = self._get_in_organization(staff_id, organization)
        self.repo.delete(self.db, staff)
        logger.info(f"🗑️ Staff member {staff_id} deleted")

    async def reset_password(self, clerk_org_id: Optional[str], staff_id: int) -> str:
        organization = require_organization(self.db, clerk_org_id)
        staff = self._get_in_organization(staff_id, organization)
        if not staff.clerk_user_id:
            raise HTTPException(status_code=404, detail="Staff member has no login account")

        password = generate_temporary_password()
        try:
            await self.identity.update_user(staff.clerk_user_id, password=password, skip_password_checks=True)
        except IdentityProviderError as e:
            logger.error(f"❌ Password reset failed for staff {staff_id}: {e}")
            raise HTTPException(
                status_code=400 if e.is_client_error else 500,
                detail=f"Failed to reset password: {e.user_message()}",
            ) from e

        logger.info(f"🔄 Password reset for staff {staff_id}")
        return password
