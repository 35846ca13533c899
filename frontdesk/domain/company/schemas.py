"""Company suggestion schemas"""

from datetime import datetime
from typing import Optional

from ...schemas import CamelModel


class SuggestionQuery(CamelModel):
    query: str = ""
    organization_id: Optional[str] = None


class RecordUsageInput(CamelModel):
    name: str
    organization_id: Optional[str] = None


class CompanySuggestionResponse(CamelModel):
    id: int
    name: str
    use_count: int
    last_used: Optional[datetime] = None
