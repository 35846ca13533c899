"""Organization repository - Database operations for tenants"""

from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from ...database import dialect_insert
from ...models import Organization


class OrganizationRepository:
    """Repository for organization database operations"""

    @staticmethod
    def get_by_clerk_id(db: Session, clerk_org_id: Optional[str]) -> Optional[Organization]:
        if not clerk_org_id:
            return None
        return db.query(Organization).filter(Organization.clerk_org_id == clerk_org_id).first()

    @staticmethod
    def get_by_id(db: Session, organization_id: int) -> Optional[Organization]:
        return db.query(Organization).filter(Organization.id == organization_id).first()

    @staticmethod
    def upsert(db: Session, clerk_org_id: str, name: str, slug: str) -> Organization:
        """Insert or refresh name/slug keyed by the identity provider org id (last write wins)"""
        insert = dialect_insert(db)
        stmt = (
            insert(Organization)
            .values(clerk_org_id=clerk_org_id, name=name, slug=slug)
            .on_conflict_do_update(
                index_elements=["clerk_org_id"],
                set_={"name": name, "slug": slug, "updated_at": func.now()},
            )
        )
        db.execute(stmt)
        db.commit()
        organization = db.query(Organization).filter(Organization.clerk_org_id == clerk_org_id).one()
        db.refresh(organization)
        return organization

    @staticmethod
    def update(db: Session, organization: Organization, **updates) -> Organization:
        for key, value in updates.items():
            if value is not None and hasattr(organization, key):
                setattr(organization, key, value)
        db.commit()
        db.refresh(organization)
        return organization
