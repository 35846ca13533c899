"""Project procedures"""

from ...rpc import ProcedureContext, ProcedureRouter
from ...schemas import IdInput, SuccessResponse
from .schemas import (
    BoardColumnResponse,
    ColumnCreate,
    ColumnResponse,
    ColumnUpdate,
    ConvertTicketInput,
    ProjectAssignInput,
    ProjectBoardInput,
    ProjectBoardResponse,
    ProjectCreate,
    ProjectDetailResponse,
    ProjectListInput,
    ProjectResponse,
    ProjectStatusInput,
    ProjectUpdate,
    TaskCreate,
    TaskMoveInput,
    TaskResponse,
    TaskUpdate,
)
from .service import ProjectService

router = ProcedureRouter("project")


def get_project_service(ctx: ProcedureContext) -> ProjectService:
    return ProjectService(ctx.db, ctx.user_id, ctx.org_id)


@router.mutation("create", ProjectCreate)
def create(ctx: ProcedureContext, data: ProjectCreate):
    return ProjectResponse.model_validate(get_project_service(ctx).create_project(data))


@router.query("getAll", ProjectListInput)
def get_all(ctx: ProcedureContext, data: ProjectListInput):
    return [ProjectResponse.model_validate(p) for p in get_project_service(ctx).get_all(data)]


@router.query("getById", IdInput)
def get_by_id(ctx: ProcedureContext, data: IdInput):
    return ProjectDetailResponse.model_validate(get_project_service(ctx).get_project(data.id))


@router.mutation("update", ProjectUpdate)
def update(ctx: ProcedureContext, data: ProjectUpdate):
    return ProjectResponse.model_validate(get_project_service(ctx).update_project(data))


@router.mutation("updateStatus", ProjectStatusInput)
def update_status(ctx: ProcedureContext, data: ProjectStatusInput):
    return ProjectResponse.model_validate(get_project_service(ctx).update_status(data.id, data.status))


@router.mutation("assign", ProjectAssignInput)
def assign(ctx: ProcedureContext, data: ProjectAssignInput):
    return ProjectResponse.model_validate(get_project_service(ctx).assign(data))


@router.mutation("convertTicketToProject", ConvertTicketInput)
def convert_ticket_to_project(ctx: ProcedureContext, data: ConvertTicketInput):
    return ProjectResponse.model_validate(get_project_service(ctx).convert_ticket(data))


@router.mutation("delete", IdInput)
def delete(ctx: ProcedureContext, data: IdInput):
    get_project_service(ctx).delete_project(data.id)
    return SuccessResponse(message="Project deleted")


@router.query("getProjectBoard", ProjectBoardInput)
def get_project_board(ctx: ProcedureContext, data: ProjectBoardInput):
    project = get_project_service(ctx).get_board(data.project_id)
    return ProjectBoardResponse(
        project=ProjectResponse.model_validate(project),
        columns=[BoardColumnResponse.model_validate(c) for c in project.columns],
    )


@router.mutation("createColumn", ColumnCreate)
def create_column(ctx: ProcedureContext, data: ColumnCreate):
    return ColumnResponse.model_validate(get_project_service(ctx).create_column(data))


@router.mutation("updateColumn", ColumnUpdate)
def update_column(ctx: ProcedureContext, data: ColumnUpdate):
    return ColumnResponse.model_validate(get_project_service(ctx).update_column(data))


@router.mutation("deleteColumn", IdInput)
def delete_column(ctx: ProcedureContext, data: IdInput):
    get_project_service(ctx).delete_column(data.id)
    return SuccessResponse(message="Column deleted")


@router.mutation("createTask", TaskCreate)
def create_task(ctx: ProcedureContext, data: TaskCreate):
    return TaskResponse.model_validate(get_project_service(ctx).create_task(data))


@router.mutation("updateTask", TaskUpdate)
def update_task(ctx: ProcedureContext, data: TaskUpdate):
    return TaskResponse.model_validate(get_project_service(ctx).update_task(data))


@router.mutation("moveTask", TaskMoveInput)
def move_task(ctx: ProcedureContext, data: TaskMoveInput):
    return TaskResponse.model_validate(get_project_service(ctx).move_task(data))


@router.mutation("deleteTask", IdInput)
def delete_task(ctx: ProcedureContext, data: IdInput):
    get_project_service(ctx).delete_task(data.id)
    return SuccessResponse(message="Task deleted")
