"""Company suggestion procedures"""

from ...rpc import ProcedureContext, ProcedureRouter
from ...schemas import IdInput, SuccessResponse
from .schemas import CompanySuggestionResponse, RecordUsageInput, SuggestionQuery
from .service import CompanyService

router = ProcedureRouter("company")


@router.query("getSuggestions", SuggestionQuery, public=True)
def get_suggestions(ctx: ProcedureContext, data: SuggestionQuery):
    suggestions = CompanyService(ctx.db).get_suggestions(data.query, data.organization_id or ctx.org_id)
    return [CompanySuggestionResponse.model_validate(s) for s in suggestions]


@router.mutation("recordUsage", RecordUsageInput)
def record_usage(ctx: ProcedureContext, data: RecordUsageInput):
    suggestion = CompanyService(ctx.db).record_usage_for_org(data.organization_id or ctx.org_id, data.name)
    return CompanySuggestionResponse.model_validate(suggestion) if suggestion else None


@router.query("getAll")
def get_all(ctx: ProcedureContext):
    return [CompanySuggestionResponse.model_validate(s) for s in CompanyService(ctx.db).get_all(ctx.org_id)]


@router.mutation("delete", IdInput)
def delete(ctx: ProcedureContext, data: IdInput):
    CompanyService(ctx.db).delete(ctx.org_id, data.id)
    return SuccessResponse(message="Company deleted")
