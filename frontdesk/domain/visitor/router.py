"""Visitor procedures"""

from ...rpc import ProcedureContext, ProcedureRouter
from ...schemas import IdInput
from .schemas import (
    VisitorCreate,
    VisitorDetailResponse,
    VisitorExportInput,
    VisitorListInput,
    VisitorResponse,
    VisitorSearchInput,
)
from .service import VisitorService

router = ProcedureRouter("visitor")


@router.mutation("create", VisitorCreate, public=True)
async def create(ctx: ProcedureContext, data: VisitorCreate):
    visitor = await VisitorService(ctx.db).create_visitor(data)
    return VisitorResponse.model_validate(visitor)


@router.query("list", VisitorListInput)
def list_visitors(ctx: ProcedureContext, data: VisitorListInput):
    return [VisitorResponse.model_validate(v) for v in VisitorService(ctx.db).list_visitors(ctx.org_id, data.filter)]


@router.query("getById", IdInput)
def get_by_id(ctx: ProcedureContext, data: IdInput):
    return VisitorDetailResponse.model_validate(VisitorService(ctx.db).get_visitor(ctx.org_id, data.id))


@router.query("search", VisitorSearchInput, public=True)
def search(ctx: ProcedureContext, data: VisitorSearchInput):
    visitors = VisitorService(ctx.db).search(data.query, data.organization_id or ctx.org_id)
    return [VisitorResponse.model_validate(v) for v in visitors]


@router.mutation("checkoutPublic", IdInput, public=True)
def checkout_public(ctx: ProcedureContext, data: IdInput):
    return VisitorResponse.model_validate(VisitorService(ctx.db).checkout_public(data.id))


@router.mutation("checkout", IdInput)
def checkout(ctx: ProcedureContext, data: IdInput):
    return VisitorResponse.model_validate(VisitorService(ctx.db).checkout(ctx.org_id, data.id))


@router.query("export", VisitorExportInput)
def export(ctx: ProcedureContext, data: VisitorExportInput):
    return VisitorService(ctx.db).export(ctx.org_id, data)
