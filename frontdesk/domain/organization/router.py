"""Organization procedures"""

from ...rpc import ProcedureContext, ProcedureRouter
from ...schemas import OrganizationResponse
from .schemas import OrganizationSettingsInput, OrganizationSyncInput
from .service import OrganizationService

router = ProcedureRouter("organization")


def get_organization_service(ctx: ProcedureContext) -> OrganizationService:
    return OrganizationService(ctx.db, ctx.identity)


@router.mutation("syncToDB")
async def sync_to_db(ctx: ProcedureContext):
    result = await get_organization_service(ctx).sync_to_db(ctx.user_id)
    result["organization"] = OrganizationResponse.model_validate(result["organization"])
    return result


@router.mutation("syncOrganization", OrganizationSyncInput, public=True)
def sync_organization(ctx: ProcedureContext, data: OrganizationSyncInput):
    return OrganizationResponse.model_validate(get_organization_service(ctx).sync_organization(data))


@router.query("getCurrent")
def get_current(ctx: ProcedureContext):
    organization = get_organization_service(ctx).get_current(ctx.org_id)
    return OrganizationResponse.model_validate(organization) if organization else None


@router.mutation("updateSettings", OrganizationSettingsInput)
def update_settings(ctx: ProcedureContext, data: OrganizationSettingsInput):
    organization = get_organization_service(ctx).update_settings(ctx.org_id, data)
    return OrganizationResponse.model_validate(organization)
