"""Receptionist repository - Database operations for front desk profiles"""

from typing import Optional

from sqlalchemy.orm import Session

from ...database import dialect_insert
from ...models import Receptionist

DEFAULT_LOCATION = "Main Reception"


class ReceptionistRepository:
    """Repository for receptionist database operations"""

    @staticmethod
    def get_by_clerk_user_id(db: Session, clerk_user_id: Optional[str]) -> Optional[Receptionist]:
        if not clerk_user_id:
            return None
        return db.query(Receptionist).filter(Receptionist.clerk_user_id == clerk_user_id).first()

    @staticmethod
    def upsert(
        db: Session,
        clerk_user_id: str,
        organization_id: Optional[int],
        full_name: str,
        email: Optional[str],
        location: str = DEFAULT_LOCATION,
    ) -> Receptionist:
        insert = dialect_insert(db)
        stmt = (
            insert(Receptionist)
            .values(
                clerk_user_id=clerk_user_id,
                organization_id=organization_id,
                full_name=full_name,
                email=email,
                location=location,
            )
            .on_conflict_do_update(
                index_elements=["clerk_user_id"],
                set_={"organization_id": organization_id, "full_name": full_name, "email": email},
            )
        )
        db.execute(stmt)
        db.commit()
        receptionist = db.query(Receptionist).filter(Receptionist.clerk_user_id == clerk_user_id).one()
        db.refresh(receptionist)
        return receptionist
