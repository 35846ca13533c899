"""Company service - Autocomplete for the visitor check-in form"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import CompanySuggestion
from ...shared.validators import NO_COMPANY, normalize_company, title_case_company
from ..organization.repository import OrganizationRepository
from ..organization.service import require_organization
from .repository import CompanyRepository

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2


class CompanyService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = CompanyRepository()

    def get_suggestions(self, query: str, clerk_org_id: Optional[str]) -> list[CompanySuggestion]:
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []
        organization_id = None
        if clerk_org_id:
            organization = OrganizationRepository.get_by_clerk_id(self.db, clerk_org_id)
            if not organization:
                return []
            organization_id = organization.id
        return self.repo.search(self.db, query, organization_id)

    def record_usage(self, organization_id: int, name: str) -> Optional[CompanySuggestion]:
        name = (name or "").strip()
        if not name or name.upper() == NO_COMPANY:
            return None
        return self.repo.record_usage(self.db, organization_id, title_case_company(name), normalize_company(name))

    def record_usage_for_org(self, clerk_org_id: Optional[str], name: str) -> Optional[CompanySuggestion]:
        organization = require_organization(self.db, clerk_org_id)
        return self.record_usage(organization.id, name)

    def get_all(self, clerk_org_id: Optional[str]) -> list[CompanySuggestion]:
        organization = require_organization(self.db, clerk_org_id)
        return self.repo.get_for_organization(self.db, organization.id)

    def delete(self, clerk_org_id: Optional[str], suggestion_id: int) -> None:
        organization = require_organization(self.db, clerk_org_id)
        suggestion = self.repo.get_by_id(self.db, suggestion_id)
        if not suggestion or suggestion.organization_id != organization.id:
            raise HTTPException(status_code=404, detail="Company not found")
        self.repo.delete(self.db, suggestion)
        logger.info(f"🗑️ Company suggestion {suggestion_id} deleted")
