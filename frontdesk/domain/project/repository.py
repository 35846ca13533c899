"""Project repository - Projects, board columns and tasks"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Project, ProjectColumn, ProjectTask

DEFAULT_COLUMNS = [
    ("To Do", "#6b7280"),
    ("In Progress", "#3b82f6"),
    ("Done", "#10b981"),
]


class ProjectRepository:
    """Repository for project board database operations"""

    @staticmethod
    def create_with_columns(db: Session, **project_data) -> Project:
        project = Project(**project_data)
        for order, (name, color) in enumerate(DEFAULT_COLUMNS):
            project.columns.append(ProjectColumn(name=name, color=color, order=order))
        db.add(project)
        db.commit()
        db.refresh(project)
        return project

    @staticmethod
    def get_in_organization(db: Session, project_id: int, organization_id: int) -> Optional[Project]:
        return (
            db.query(Project)
            .filter(Project.id == project_id, Project.organization_id == organization_id)
            .first()
        )

    @staticmethod
    def list_for_organization(
        db: Session,
        organization_id: int,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        assigned_to_id: Optional[int] = None,
    ) -> list[Project]:
        query = db.query(Project).filter(Project.organization_id == organization_id)
        if status:
            query = query.filter(Project.status == status)
        if priority:
            query = query.filter(Project.priority == priority)
        if assigned_to_id is not None:
            query = query.filter(Project.assigned_to_id == assigned_to_id)
        return query.order_by(Project.created_at.desc(), Project.id.desc()).all()

    @staticmethod
    def save(db: Session, instance):
        db.add(instance)
        db.commit()
        db.refresh(instance)
        return instance

    @staticmethod
    def update(db: Session, instance, **updates):
        for key, value in updates.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        db.commit()
        db.refresh(instance)
        return instance

    @staticmethod
    def delete(db: Session, instance) -> None:
        db.delete(instance)
        db.commit()

    # Board

    @staticmethod
    def get_column(db: Session, column_id: int) -> Optional[ProjectColumn]:
        return db.query(ProjectColumn).filter(ProjectColumn.id == column_id).first()

    @staticmethod
    def next_column_order(db: Session, project_id: int) -> int:
        current = db.query(func.max(ProjectColumn.order)).filter(ProjectColumn.project_id == project_id).scalar()
        return 0 if current is None else current + 1

    @staticmethod
    def column_task_count(db: Session, column_id: int) -> int:
        return db.query(ProjectTask).filter(ProjectTask.column_id == column_id).count()

    @staticmethod
    def get_task(db: Session, task_id: int) -> Optional[ProjectTask]:
        return db.query(ProjectTask).filter(ProjectTask.id == task_id).first()

    @staticmethod
    def next_task_order(db: Session, column_id: int) -> int:
        current = db.query(func.max(ProjectTask.order)).filter(ProjectTask.column_id == column_id).scalar()
        return 0 if current is None else current + 1
