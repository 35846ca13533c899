"""Ticket procedures"""

from ...rpc import ProcedureContext, ProcedureRouter
from ...schemas import IdInput
from .schemas import (
    AddMessageInput,
    TicketCreate,
    TicketDetailResponse,
    TicketListInput,
    TicketMessageResponse,
    TicketResponse,
    TicketUpdate,
)
from .service import TicketService

router = ProcedureRouter("ticket")


@router.mutation("create", TicketCreate)
async def create(ctx: ProcedureContext, data: TicketCreate):
    ticket = await TicketService(ctx.db).create_ticket(ctx.user_id, ctx.org_id, data)
    return TicketResponse.model_validate(ticket)


@router.query("getAll", TicketListInput)
def get_all(ctx: ProcedureContext, data: TicketListInput):
    return [TicketResponse.model_validate(t) for t in TicketService(ctx.db).get_all(ctx.user_id, ctx.org_id, data)]


@router.query("getMyTickets")
def get_my_tickets(ctx: ProcedureContext):
    return [TicketResponse.model_validate(t) for t in TicketService(ctx.db).get_my_tickets(ctx.user_id, ctx.org_id)]


@router.query("getById", IdInput)
def get_by_id(ctx: ProcedureContext, data: IdInput):
    ticket, show_internal = TicketService(ctx.db).get_ticket(ctx.user_id, ctx.org_id, data.id)
    detail = TicketDetailResponse.model_validate(ticket)
    if not show_internal:
        detail.messages = [m for m in detail.messages if not m.is_internal]
    return detail


@router.mutation("update", TicketUpdate)
async def update(ctx: ProcedureContext, data: TicketUpdate):
    ticket = await TicketService(ctx.db).update_ticket(ctx.user_id, ctx.org_id, data)
    return TicketResponse.model_validate(ticket)


@router.mutation("addMessage", AddMessageInput)
async def add_message(ctx: ProcedureContext, data: AddMessageInput):
    message = await TicketService(ctx.db).add_message(ctx.user_id, ctx.org_id, data)
    return TicketMessageResponse.model_validate(message)


@router.query("getMetrics")
def get_metrics(ctx: ProcedureContext):
    return TicketService(ctx.db).get_metrics(ctx.user_id, ctx.org_id)
