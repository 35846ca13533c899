"""Receptionist procedures"""

from ...rpc import ProcedureContext, ProcedureRouter
from .schemas import ReceptionistResponse
from .service import ReceptionistService

router = ProcedureRouter("receptionist")


@router.mutation("getOrCreate")
async def get_or_create(ctx: ProcedureContext):
    receptionist = await ReceptionistService(ctx.db, ctx.identity).get_or_create(ctx.user_id, ctx.org_id)
    return ReceptionistResponse.model_validate(receptionist)


@router.query("getCurrent")
def get_current(ctx: ProcedureContext):
    receptionist = ReceptionistService(ctx.db).get_current(ctx.user_id)
    return ReceptionistResponse.model_validate(receptionist) if receptionist else None


@router.query("getStaffList")
def get_staff_list(ctx: ProcedureContext):
    return ReceptionistService(ctx.db).get_staff_list(ctx.org_id)
