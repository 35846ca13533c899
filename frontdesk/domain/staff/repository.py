"""Staff repository - Database operations for staff profiles"""

from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from ...database import dialect_insert
from ...models import ROLE_ADMIN, Staff


class StaffRepository:
    """Repository for staff database operations"""

    @staticmethod
    def get_by_clerk_user_id(db: Session, clerk_user_id: Optional[str]) -> Optional[Staff]:
        if not clerk_user_id:
            return None
        return db.query(Staff).filter(Staff.clerk_user_id == clerk_user_id).first()

    @staticmethod
    def get_by_id(db: Session, staff_id: int) -> Optional[Staff]:
        return db.query(Staff).filter(Staff.id == staff_id).first()

    @staticmethod
    def get_active_by_name(db: Session, full_name: str) -> Optional[Staff]:
        return db.query(Staff).filter(Staff.full_name == full_name, Staff.is_active.is_(True)).first()

    @staticmethod
    def get_active_names(db: Session, organization_id: Optional[int] = None) -> list[str]:
        query = db.query(Staff.full_name).filter(Staff.is_active.is_(True))
        if organization_id is not None:
            query = query.filter(Staff.organization_id == organization_id)
        return [row[0] for row in query.order_by(Staff.full_name.asc()).all()]

    @staticmethod
    def get_for_organization(db: Session, organization_id: int) -> list[Staff]:
        return db.query(Staff).filter(Staff.organization_id == organization_id).order_by(Staff.full_name.asc()).all()

    @staticmethod
    def get_with_roles(db: Session, organization_id: int, roles: list[str], login_only: bool = True) -> list[Staff]:
        """Staff in the given roles; by default only those with an identity account"""
        query = db.query(Staff).filter(Staff.organization_id == organization_id, Staff.role.in_(roles))
        if login_only:
            query = query.filter(Staff.clerk_user_id.isnot(None))
        return query.all()

    @staticmethod
    def create(db: Session, **staff_data) -> Staff:
        staff = Staff(**staff_data)
        db.add(staff)
        db.commit()
        db.refresh(staff)
        return staff

    @staticmethod
    def update(db: Session, staff: Staff, **updates) -> Staff:
        for key, value in updates.items():
            if hasattr(staff, key):
                setattr(staff, key, value)
        db.commit()
        db.refresh(staff)
        return staff

    @staticmethod
    def delete(db: Session, staff: Staff) -> None:
        db.delete(staff)
        db.commit()

    @staticmethod
    def upsert_admin(
        db: Session, clerk_user_id: str, organization_id: int, full_name: str, email: Optional[str]
    ) -> Staff:
        """
        Create-or-update an Admin profile keyed on clerk_user_id.
        Concurrent first requests from the same admin converge on one row.
        """
        insert = dialect_insert(db)
        stmt = (
            insert(Staff)
            .values(
                clerk_user_id=clerk_user_id,
                organization_id=organization_id,
                full_name=full_name,
                email=email,
                role=ROLE_ADMIN,
                is_active=True,
                can_login=True,
            )
            .on_conflict_do_update(
                index_elements=["clerk_user_id"],
                set_={"role": ROLE_ADMIN, "organization_id": organization_id, "updated_at": func.now()},
            )
        )
        db.execute(stmt)
        db.commit()
        staff = db.query(Staff).filter(Staff.clerk_user_id == clerk_user_id).one()
        db.refresh(staff)
        return staff
