"""
Lazy provisioning for the role-gated sections.

The first authenticated visit to a section refreshes the tenant row and,
for organization administrators, creates their Admin staff profile.
Provisioning fails open; the role check that follows fails closed.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from .access import AccessDecision, RedirectTo, Section, resolve_section_access, sign_in_redirect
from .auth import RequestContext
from .domain.organization.repository import OrganizationRepository
from .domain.staff.repository import StaffRepository
from .identity import ADMIN_MEMBERSHIP_ROLES, ClerkClient, display_name, primary_email
from .models import Staff

logger = logging.getLogger(__name__)


async def provision_section_access(db: Session, ctx: RequestContext, identity: ClerkClient) -> Optional[Staff]:
    """Upsert the organization and, when eligible, the caller's Admin profile. Returns the staff row if any."""
    organization = None
    if ctx.org_id:
        try:
            clerk_org = await identity.get_organization(ctx.org_id)
            organization = OrganizationRepository.upsert(
                db,
                clerk_org_id=ctx.org_id,
                name=clerk_org.get("name") or ctx.org_id,
                slug=clerk_org.get("slug") or ctx.org_id,
            )
        except Exception as e:
            db.rollback()
            logger.error(f"❌ Organization sync failed for {ctx.org_id}: {e}")

    staff = StaffRepository.get_by_clerk_user_id(db, ctx.user_id)
    if staff or organization is None:
        return staff

    try:
        memberships = await identity.get_user_memberships(ctx.user_id)
        is_admin = any(
            m.get("organization", {}).get("id") == ctx.org_id and m.get("role") in ADMIN_MEMBERSHIP_ROLES
            for m in memberships
        )
        if not is_admin:
            logger.info(f"ℹ️ User {ctx.user_id} has no staff profile and is not an org admin")
            return None

        user = await identity.get_user(ctx.user_id)
        staff = StaffRepository.upsert_admin(
            db,
            clerk_user_id=ctx.user_id,
            organization_id=organization.id,
            full_name=display_name(user),
            email=primary_email(user),
        )
        logger.info(f"✅ Provisioned Admin staff profile {staff.id} for {ctx.user_id}")
        return staff
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Admin provisioning failed for {ctx.user_id}: {e}")
        return StaffRepository.get_by_clerk_user_id(db, ctx.user_id)


async def guard_section(
    section: Section, ctx: RequestContext, db: Session, identity: ClerkClient, return_url: str
) -> AccessDecision:
    if not ctx.is_authenticated:
        return RedirectTo(sign_in_redirect(return_url))
    profile = await provision_section_access(db, ctx, identity)
    return resolve_section_access(profile, section)
