"""Employee portal procedures"""

from ...rpc import ProcedureContext, ProcedureRouter
from ...schemas import StaffResponse
from ..visitor.schemas import VisitorResponse
from .schemas import PreferencesInput, RespondFromDashboardInput, RespondToVisitorInput
from .service import EmployeeService

router = ProcedureRouter("employee")


@router.mutation("respondToVisitor", RespondToVisitorInput, public=True)
def respond_to_visitor(ctx: ProcedureContext, data: RespondToVisitorInput):
    return EmployeeService(ctx.db).respond_to_visitor(data.token, data.action, data.note)


@router.query("getPendingVisitors")
def get_pending_visitors(ctx: ProcedureContext):
    return [VisitorResponse.model_validate(v) for v in EmployeeService(ctx.db).get_pending_visitors(ctx.user_id)]


@router.query("getAllVisitors")
def get_all_visitors(ctx: ProcedureContext):
    return [VisitorResponse.model_validate(v) for v in EmployeeService(ctx.db).get_all_visitors(ctx.user_id)]


@router.mutation("respondFromDashboard", RespondFromDashboardInput)
def respond_from_dashboard(ctx: ProcedureContext, data: RespondFromDashboardInput):
    return EmployeeService(ctx.db).respond_from_dashboard(ctx.user_id, data.visitor_id, data.action, data.note)


@router.query("getProfile", public=True)
def get_profile(ctx: ProcedureContext):
    staff = EmployeeService(ctx.db).get_profile(ctx.user_id)
    return StaffResponse.model_validate(staff) if staff else None


@router.mutation("updatePreferences", PreferencesInput)
def update_preferences(ctx: ProcedureContext, data: PreferencesInput):
    return StaffResponse.model_validate(EmployeeService(ctx.db).update_preferences(ctx.user_id, data))
