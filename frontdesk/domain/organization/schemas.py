"""Organization domain schemas"""

from typing import Optional

from ...schemas import CamelModel


class OrganizationSyncInput(CamelModel):
    clerk_org_id: str
    name: str
    slug: str


class OrganizationSettingsInput(CamelModel):
    name: Optional[str] = None
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None
