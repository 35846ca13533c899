"""
RPC endpoint
Single multiplexing route: GET for queries (input in ?input=), POST for mutations (JSON body)
"""

import inspect
import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..auth import RequestContext, get_request_context
from ..database import get_db
from ..domain.analytics.router import router as analytics_procedures
from ..domain.company.router import router as company_procedures
from ..domain.employee.router import router as employee_procedures
from ..domain.meeting.router import router as meeting_procedures
from ..domain.notification.router import router as notification_procedures
from ..domain.organization.router import router as organization_procedures
from ..domain.project.router import router as project_procedures
from ..domain.receptionist.router import router as receptionist_procedures
from ..domain.staff.router import router as staff_procedures
from ..domain.ticket.router import router as ticket_procedures
from ..domain.visitor.router import router as visitor_procedures
from ..identity import ClerkClient, get_identity_client
from ..rpc import MUTATION, QUERY, ProcedureContext, build_registry, error_code_for_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trpc", tags=["RPC"])

PROCEDURES = build_registry(
    organization_procedures,
    staff_procedures,
    visitor_procedures,
    employee_procedures,
    company_procedures,
    receptionist_procedures,
    ticket_procedures,
    project_procedures,
    meeting_procedures,
    notification_procedures,
    analytics_procedures,
)

METHOD_KINDS = {"GET": QUERY, "POST": MUTATION}


def error_response(path: str, status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "message": message,
                "code": error_code_for_status(status_code),
                "httpStatus": status_code,
                "path": path,
            }
        },
    )


def format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(parts) or "Invalid input"


def _unwrap(raw: Any) -> Any:
    # Clients using a transformer send {"json": <input>}
    if isinstance(raw, dict) and set(raw) == {"json"}:
        return raw["json"]
    return raw


async def read_input(request: Request) -> Optional[Any]:
    """Raises ValueError on malformed JSON"""
    if request.method == "GET":
        raw = request.query_params.get("input")
        return _unwrap(json.loads(raw)) if raw else None
    body = await request.body()
    return _unwrap(json.loads(body)) if body else None


@router.api_route("/{procedure}", methods=["GET", "POST"])
async def call_procedure(
    procedure: str,
    request: Request,
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
    identity: ClerkClient = Depends(get_identity_client),
):
    entry = PROCEDURES.get(procedure)
    if entry is None:
        return error_response(procedure, 404, f'No procedure found on path "{procedure}"')

    if METHOD_KINDS.get(request.method) != entry.kind:
        return error_response(procedure, 405, f"Unsupported {request.method} request to {entry.kind} procedure")

    if not entry.public and not context.user_id:
        return error_response(procedure, 401, "You must be signed in to do this")

    try:
        raw_input = await read_input(request)
    except ValueError:
        return error_response(procedure, 400, "Input is not valid JSON")

    ctx = ProcedureContext(db=db, identity=identity, user_id=context.user_id, org_id=context.org_id)
    try:
        if entry.input_model is not None:
            data = entry.input_model.model_validate(raw_input if raw_input is not None else {})
            result = entry.handler(ctx, data)
        else:
            result = entry.handler(ctx)
        if inspect.isawaitable(result):
            result = await result
    except ValidationError as e:
        logger.info(f"ℹ️ Invalid input for {procedure}: {e.error_count()} error(s)")
        return error_response(procedure, 400, format_validation_error(e))
    except HTTPException as e:
        db.rollback()
        if e.status_code >= 500:
            logger.error(f"❌ {procedure} failed: {e.detail}")
        return error_response(procedure, e.status_code, str(e.detail))
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Unhandled error in {procedure}: {str(e)}", exc_info=True)
        return error_response(procedure, 500, "Internal server error")

    return {"result": {"data": jsonable_encoder(result, by_alias=True)}}
