"""Staff procedures"""

from ...rpc import ProcedureContext, ProcedureRouter
from ...schemas import IdInput, StaffResponse, SuccessResponse
from .schemas import ActiveStaffInput, PasswordResetResponse, StaffCreate, StaffUpdate, StaffWithPassword
from .service import StaffService

router = ProcedureRouter("staff")


def get_staff_service(ctx: ProcedureContext) -> StaffService:
    return StaffService(ctx.db, ctx.identity)


def _with_password(result: dict) -> StaffWithPassword:
    return StaffWithPassword(
        staff=StaffResponse.model_validate(result["staff"]),
        temporary_password=result["temporary_password"],
    )


@router.query("getActiveStaff", ActiveStaffInput, public=True)
def get_active_staff(ctx: ProcedureContext, data: ActiveStaffInput):
    return get_staff_service(ctx).get_active_staff(data.organization_id or ctx.org_id)


@router.query("getAll")
def get_all(ctx: ProcedureContext):
    return [StaffResponse.model_validate(s) for s in get_staff_service(ctx).get_all(ctx.org_id)]


@router.mutation("create", StaffCreate)
async def create(ctx: ProcedureContext, data: StaffCreate):
    result = await get_staff_service(ctx).create_staff(ctx.org_id, data)
    return _with_password(result)


@router.mutation("update", StaffUpdate)
async def update(ctx: ProcedureContext, data: StaffUpdate):
    result = await get_staff_service(ctx).update_staff(ctx.org_id, data)
    return _with_password(result)


@router.mutation("delete", IdInput)
def delete(ctx: ProcedureContext, data: IdInput):
    get_staff_service(ctx).delete_staff(ctx.org_id, data.id)
    return SuccessResponse(message="Staff member deleted")


@router.mutation("resetPassword", IdInput)
async def reset_password(ctx: ProcedureContext, data: IdInput):
    password = await get_staff_service(ctx).reset_password(ctx.org_id, data.id)
    return PasswordResetResponse(temporary_password=password)
