"""Meeting procedures"""

from ...rpc import ProcedureContext, ProcedureRouter
from ...schemas import IdInput, SuccessResponse
from .schemas import (
    CalendarAuthInput,
    CalendarAuthUrl,
    CalendarStatus,
    LinkVisitorInput,
    MeetingCreate,
    MeetingListInput,
    MeetingResponse,
    MeetingUpdate,
)
from .service import MeetingService

router = ProcedureRouter("meeting")


@router.mutation("create", MeetingCreate)
async def create(ctx: ProcedureContext, data: MeetingCreate):
    return MeetingResponse.model_validate(await MeetingService(ctx.db).create_meeting(ctx.user_id, data))


@router.query("getMyMeetings", MeetingListInput)
def get_my_meetings(ctx: ProcedureContext, data: MeetingListInput):
    meetings = MeetingService(ctx.db).get_my_meetings(ctx.user_id, data.status)
    return [MeetingResponse.model_validate(m) for m in meetings]


@router.query("getAll")
def get_all(ctx: ProcedureContext):
    return [MeetingResponse.model_validate(m) for m in MeetingService(ctx.db).get_all(ctx.org_id)]


@router.query("getById", IdInput)
def get_by_id(ctx: ProcedureContext, data: IdInput):
    return MeetingResponse.model_validate(MeetingService(ctx.db).get_meeting(ctx.user_id, data.id))


@router.mutation("update", MeetingUpdate)
async def update(ctx: ProcedureContext, data: MeetingUpdate):
    return MeetingResponse.model_validate(await MeetingService(ctx.db).update_meeting(ctx.user_id, data))


@router.mutation("delete", IdInput)
async def delete(ctx: ProcedureContext, data: IdInput):
    await MeetingService(ctx.db).delete_meeting(ctx.user_id, data.id)
    return SuccessResponse(message="Meeting deleted successfully.")


@router.mutation("linkVisitor", LinkVisitorInput)
def link_visitor(ctx: ProcedureContext, data: LinkVisitorInput):
    meeting = MeetingService(ctx.db).link_visitor(ctx.user_id, data.meeting_id, data.visitor_id)
    return MeetingResponse.model_validate(meeting)


@router.query("getTodaysMeetings")
def get_todays_meetings(ctx: ProcedureContext):
    return [MeetingResponse.model_validate(m) for m in MeetingService(ctx.db).get_todays_meetings(ctx.org_id)]


@router.query("getCalendarStatus")
def get_calendar_status(ctx: ProcedureContext):
    return CalendarStatus(**MeetingService(ctx.db).get_calendar_status(ctx.user_id))


@router.query("getCalendarAuthUrl", CalendarAuthInput)
def get_calendar_auth_url(ctx: ProcedureContext, data: CalendarAuthInput):
    return CalendarAuthUrl(url=MeetingService(ctx.db).get_calendar_auth_url(ctx.user_id, data.provider))
