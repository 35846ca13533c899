"""
Section pages
Role-gated entry points for the admin, employee and IT areas plus the root redirect
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ..access import RedirectTo, Section, home_for_role, resolve_root_redirect
from ..auth import RequestContext, get_request_context
from ..database import get_db
from ..domain.staff.repository import StaffRepository
from ..identity import ClerkClient, get_identity_client
from ..provisioning import guard_section

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Sections"])


def _original_url(request: Request) -> str:
    return str(request.url)


@router.get("/")
async def root_redirect(context: RequestContext = Depends(get_request_context), db: Session = Depends(get_db)):
    """Send the caller to exactly one place; never renders section content"""
    role = None
    if context.is_authenticated:
        try:
            staff = StaffRepository.get_by_clerk_user_id(db, context.user_id)
            role = staff.role if staff else None
        except Exception as e:
            logger.error(f"❌ Staff lookup failed for root redirect: {e}")
    return RedirectResponse(resolve_root_redirect(context.is_authenticated, role), status_code=307)


@router.get("/employee/respond")
async def visitor_response_page(token: Optional[str] = None, action: Optional[str] = None):
    """Public page behind the email links; the client posts these to employee.respondToVisitor"""
    return {"page": "employee/respond", "token": token, "action": action}


async def _render_section(
    section: Section,
    page: str,
    request: Request,
    context: RequestContext,
    db: Session,
    identity: ClerkClient,
):
    decision = await guard_section(section, context, db, identity, _original_url(request))
    if isinstance(decision, RedirectTo):
        logger.info(f"🔄 {section.value} section redirect for {context.user_id}: {decision.path}")
        return RedirectResponse(decision.path, status_code=307)

    staff = StaffRepository.get_by_clerk_user_id(db, context.user_id)
    return {
        "section": section.value,
        "page": page or "dashboard",
        "organizationId": context.org_id,
        "staff": {
            "id": staff.id,
            "fullName": staff.full_name,
            "role": staff.role,
            "home": home_for_role(staff.role),
        }
        if staff
        else None,
    }


@router.get("/dashboard")
@router.get("/dashboard/{page:path}")
async def admin_section(
    request: Request,
    page: str = "",
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
    identity: ClerkClient = Depends(get_identity_client),
):
    return await _render_section(Section.ADMIN, page, request, context, db, identity)


@router.get("/employee")
@router.get("/employee/{page:path}")
async def employee_section(
    request: Request,
    page: str = "",
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
    identity: ClerkClient = Depends(get_identity_client),
):
    return await _render_section(Section.EMPLOYEE, page, request, context, db, identity)


@router.get("/it")
@router.get("/it/{page:path}")
async def it_section(
    request: Request,
    page: str = "",
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
    identity: ClerkClient = Depends(get_identity_client),
):
    return await _render_section(Section.IT, page, request, context, db, identity)
