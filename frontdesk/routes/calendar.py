"""
Calendar Integration Routes
OAuth callbacks for Google and Outlook, and disconnecting a provider
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..auth import RequestContext, get_request_context
from ..database import get_db
from ..domain.staff.repository import StaffRepository
from ..services.calendar_service import (
    GOOGLE,
    PROVIDERS,
    clear_tokens,
    exchange_code_for_tokens,
    load_tokens,
    store_tokens,
)
from ..services.google_calendar_service import revoke_google_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/calendar", tags=["Calendar"])

MEETINGS_PAGE = "/employee/meetings"


class DisconnectRequest(BaseModel):
    provider: Optional[str] = None


def meetings_redirect(**params) -> RedirectResponse:
    return RedirectResponse(f"{MEETINGS_PAGE}?{urlencode(params)}", status_code=307)


async def handle_oauth_callback(
    provider: str, code: Optional[str], state: Optional[str], error: Optional[str], db: Session
) -> RedirectResponse:
    if error:
        logger.warning(f"⚠️ {provider} OAuth returned error: {error}")
        return meetings_redirect(error=error)
    if not code or not state:
        return meetings_redirect(error="missing_parameters")

    try:
        staff = StaffRepository.get_by_id(db, int(state))
        if not staff:
            return meetings_redirect(error="staff_not_found")

        token = await exchange_code_for_tokens(provider, code)
        store_tokens(db, staff, provider, token)
        logger.info(f"✅ {provider} calendar connected for staff {staff.id}")
        return meetings_redirect(calendar_connected=provider)
    except Exception as e:
        db.rollback()
        logger.error(f"❌ {provider} OAuth callback failed: {str(e)}")
        return meetings_redirect(error=str(e) or "oauth_failed")


@router.get("/google/callback")
async def google_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return await handle_oauth_callback("google", code, state, error, db)


@router.get("/outlook/callback")
async def outlook_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return await handle_oauth_callback("outlook", code, state, error, db)


@router.post("/disconnect")
async def disconnect_calendar(
    payload: DisconnectRequest,
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Forget a provider's tokens for the signed-in staff member"""
    if not context.is_authenticated:
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})
    if payload.provider not in PROVIDERS:
        return JSONResponse(status_code=400, content={"error": "Invalid provider"})

    staff = StaffRepository.get_by_clerk_user_id(db, context.user_id)
    if not staff:
        return JSONResponse(status_code=404, content={"error": "Staff not found"})

    if payload.provider == GOOGLE:
        token = load_tokens(staff, GOOGLE)
        if token and token.get("access_token"):
            await revoke_google_token(token["access_token"])

    try:
        clear_tokens(db, staff, payload.provider)
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Failed to disconnect {payload.provider} for staff {staff.id}: {str(e)}")
        return JSONResponse(status_code=500, content={"error": "Failed to disconnect calendar"})

    logger.info(f"👋 {payload.provider} calendar disconnected for staff {staff.id}")
    return {"success": True, "message": f"{payload.provider.capitalize()} Calendar disconnected"}
