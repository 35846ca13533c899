"""Project service - IT projects and their kanban boards"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Organization, Project, ProjectColumn, ProjectTask, Staff
from ...services.notification_service import notify_staff
from ...shared.validators import utcnow
from ..organization.service import require_organization
from ..staff.repository import StaffRepository
from ..staff.service import is_it_or_admin, require_it_or_admin, require_staff
from ..ticket.repository import TicketRepository
from .repository import ProjectRepository
from .schemas import (
    ColumnCreate,
    ColumnUpdate,
    ConvertTicketInput,
    ProjectAssignInput,
    ProjectCreate,
    ProjectListInput,
    ProjectUpdate,
    TaskCreate,
    TaskMoveInput,
    TaskUpdate,
)

logger = logging.getLogger(__name__)

DONE = "Done"


class ProjectService:
    """Service layer for project business logic"""

    def __init__(self, db: Session, user_id: Optional[str], clerk_org_id: Optional[str]):
        self.db = db
        self.repo = ProjectRepository()
        self.staff = require_staff(db, user_id)
        self.organization = require_organization(db, clerk_org_id)

    def _require_it(self) -> Staff:
        return require_it_or_admin(self.staff)

    def _get_project(self, project_id: int) -> Project:
        project = self.repo.get_in_organization(self.db, project_id, self.organization.id)
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")
        return project

    def _check_assignee(self, assigned_to_id: Optional[int]) -> None:
        if assigned_to_id is None:
            return
        assignee = StaffRepository.get_by_id(self.db, assigned_to_id)
        if not assignee or assignee.organization_id != self.organization.id:
            raise HTTPException(status_code=400, detail="Assignee not found in this organization")

    def _notify_assignee(self, project: Project) -> None:
        if not project.assigned_to or project.assigned_to.id == self.staff.id:
            return
        notify_staff(
            self.db,
            project.assigned_to,
            self.organization.clerk_org_id,
            "project_assigned",
            title="Project Assigned",
            message=f'{self.staff.full_name} assigned the project "{project.title}" to you',
            related_id=project.id,
            related_type="project",
            action_url=f"/it/projects/{project.id}",
        )

    def _create(self, organization: Organization, ticket_id: Optional[int], **fields) -> Project:
        ticket = None
        if ticket_id is not None:
            ticket = TicketRepository.get_in_organization(self.db, ticket_id, organization.id)
            if not ticket:
                raise HTTPException(status_code=404, detail="Ticket not found")
            if ticket.converted_to_project:
                raise HTTPException(status_code=400, detail="This ticket has already been converted to a project")

        self._check_assignee(fields.get("assigned_to_id"))
        project = self.repo.create_with_columns(
            self.db,
            organization_id=organization.id,
            created_by_id=self.staff.id,
            ticket_id=ticket.id if ticket else None,
            status="To Do",
            **fields,
        )
        if ticket:
            TicketRepository.update(self.db, ticket, converted_to_project=True)
        logger.info(f"✅ Project {project.id} created by staff {self.staff.id}")
        self._notify_assignee(project)
        return project

    def create_project(self, data: ProjectCreate) -> Project:
        self._require_it()
        return self._create(
            self.organization,
            data.ticket_id,
            title=data.title,
            description=data.description,
            priority=data.priority,
            assigned_to_id=data.assigned_to_id,
            due_date=data.due_date,
        )

    def convert_ticket(self, data: ConvertTicketInput) -> Project:
        self._require_it()
        ticket = TicketRepository.get_in_organization(self.db, data.ticket_id, self.organization.id)
        if not ticket:
            raise HTTPException(status_code=404, detail="Ticket not found")
        return self._create(
            self.organization,
            ticket.id,
            title=data.title or ticket.title,
            description=data.description or ticket.description,
            priority=data.priority or ticket.priority,
            assigned_to_id=data.assigned_to_id if data.assigned_to_id is not None else ticket.assigned_to_id,
            due_date=data.due_date,
        )

    def get_all(self, data: ProjectListInput) -> list[Project]:
        self._require_it()
        return self.repo.list_for_organization(
            self.db,
            self.organization.id,
            status=data.status,
            priority=data.priority,
            assigned_to_id=self.staff.id if data.assigned_to_me else None,
        )

    def get_project(self, project_id: int) -> Project:
        return self._get_project(project_id)

    def update_project(self, data: ProjectUpdate) -> Project:
        project = self._get_project(data.id)
        if not (is_it_or_admin(self.staff) or self.staff.id in (project.created_by_id, project.assigned_to_id)):
            raise HTTPException(status_code=403, detail="You do not have permission to edit this project")
        updates = data.model_dump(exclude_unset=True, exclude={"id"})
        if "assigned_to_id" in updates:
            self._check_assignee(updates["assigned_to_id"])
        previous_assignee = project.assigned_to_id
        project = self.repo.update(self.db, project, **updates)
        if project.assigned_to_id != previous_assignee:
            self._notify_assignee(project)
        return project

    def update_status(self, project_id: int, status: str) -> Project:
        self._require_it()
        project = self._get_project(project_id)
        completed_at = utcnow() if status == DONE else None
        return self.repo.update(self.db, project, status=status, completed_at=completed_at)

    def assign(self, data: ProjectAssignInput) -> Project:
        self._require_it()
        project = self._get_project(data.id)
        self._check_assignee(data.assigned_to_id)
        project = self.repo.update(self.db, project, assigned_to_id=data.assigned_to_id)
        self._notify_assignee(project)
        return project

    def delete_project(self, project_id: int) -> None:
        self._require_it()
        project = self._get_project(project_id)
        if project.ticket:
            TicketRepository.update(self.db, project.ticket, converted_to_project=False)
        self.repo.delete(self.db, project)
        logger.info(f"🗑️ Project {project_id} deleted")

    # Board

    def get_board(self, project_id: int) -> Project:
        self._require_it()
        return self._get_project(project_id)

    def _get_column(self, column_id: int) -> ProjectColumn:
        column = self.repo.get_column(self.db, column_id)
        if not column or column.project.organization_id != self.organization.id:
            raise HTTPException(status_code=404, detail="Column not found")
        return column

    def _get_task(self, task_id: int) -> ProjectTask:
        task = self.repo.get_task(self.db, task_id)
        if not task or task.project.organization_id != self.organization.id:
            raise HTTPException(status_code=404, detail="Task not found")
        return task

    def create_column(self, data: ColumnCreate) -> ProjectColumn:
        self._require_it()
        project = self._get_project(data.project_id)
        column = ProjectColumn(
            project_id=project.id,
            name=data.name,
            color=data.color,
            order=self.repo.next_column_order(self.db, project.id),
        )
        return self.repo.save(self.db, column)

    def update_column(self, data: ColumnUpdate) -> ProjectColumn:
        self._require_it()
        column = self._get_column(data.id)
        return self.repo.update(self.db, column, **data.model_dump(exclude_unset=True, exclude={"id"}))

    def delete_column(self, column_id: int) -> None:
        self._require_it()
        column = self._get_column(column_id)
        if self.repo.column_task_count(self.db, column.id):
            raise HTTPException(status_code=400, detail="Move or delete the tasks in this column first")
        self.repo.delete(self.db, column)

    def create_task(self, data: TaskCreate) -> ProjectTask:
        self._require_it()
        project = self._get_project(data.project_id)
        column = self._get_column(data.column_id)
        if column.project_id != project.id:
            raise HTTPException(status_code=400, detail="Column does not belong to this project")
        self._check_assignee(data.assigned_to_id)
        task = ProjectTask(
            project_id=project.id,
            column_id=column.id,
            title=data.title,
            description=data.description,
            priority=data.priority,
            assigned_to_id=data.assigned_to_id,
            due_date=data.due_date,
            order=self.repo.next_task_order(self.db, column.id),
        )
        return self.repo.save(self.db, task)

    def update_task(self, data: TaskUpdate) -> ProjectTask:
        self._require_it()
        task = self._get_task(data.id)
        updates = data.model_dump(exclude_unset=True, exclude={"id"})
        if "assigned_to_id" in updates:
            self._check_assignee(updates["assigned_to_id"])
        return self.repo.update(self.db, task, **updates)

    def move_task(self, data: TaskMoveInput) -> ProjectTask:
        self._require_it()
        task = self._get_task(data.task_id)
        column = self._get_column(data.column_id)
        if column.project_id != task.project_id:
            raise HTTPException(status_code=400, detail="Column does not belong to this project")
        order = data.order
        if order is None:
            order = self.repo.next_task_order(self.db, column.id)
        return self.repo.update(self.db, task, column_id=column.id, order=order)

    def delete_task(self, task_id: int) -> None:
        self._require_it()
        self.repo.delete(self.db, self._get_task(task_id))
