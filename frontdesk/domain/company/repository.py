"""Company suggestion repository"""

from typing import Optional

from sqlalchemy.orm import Session

from ...database import dialect_insert
from ...models import CompanySuggestion
from ...shared.validators import utcnow


class CompanyRepository:
    """Repository for company suggestion database operations"""

    @staticmethod
    def search(db: Session, query: str, organization_id: Optional[int] = None, limit: int = 10) -> list[CompanySuggestion]:
        q = db.query(CompanySuggestion).filter(CompanySuggestion.normalized_name.contains(query.lower()))
        if organization_id is not None:
            q = q.filter(CompanySuggestion.organization_id == organization_id)
        return (
            q.order_by(CompanySuggestion.use_count.desc(), CompanySuggestion.last_used.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def record_usage(db: Session, organization_id: int, name: str, normalized_name: str) -> CompanySuggestion:
        """Bump use_count for a known company or insert it with a count of 1"""
        now = utcnow()
        insert = dialect_insert(db)
        stmt = (
            insert(CompanySuggestion)
            .values(
                organization_id=organization_id,
                name=name,
                normalized_name=normalized_name,
                use_count=1,
                last_used=now,
            )
            .on_conflict_do_update(
                index_elements=["organization_id", "normalized_name"],
                set_={"use_count": CompanySuggestion.use_count + 1, "last_used": now},
            )
        )
        db.execute(stmt)
        db.commit()
        return (
            db.query(CompanySuggestion)
            .filter(
                CompanySuggestion.organization_id == organization_id,
                CompanySuggestion.normalized_name == normalized_name,
            )
            .one()
        )

    @staticmethod
    def get_for_organization(db: Session, organization_id: int) -> list[CompanySuggestion]:
        return (
            db.query(CompanySuggestion)
            .filter(CompanySuggestion.organization_id == organization_id)
            .order_by(CompanySuggestion.use_count.desc(), CompanySuggestion.name.asc())
            .all()
        )

    @staticmethod
    def get_by_id(db: Session, suggestion_id: int) -> Optional[CompanySuggestion]:
        return db.query(CompanySuggestion).filter(CompanySuggestion.id == suggestion_id).first()

    @staticmethod
    def delete(db: Session, suggestion: CompanySuggestion) -> None:
        db.delete(suggestion)
        db.commit()
