"""Staff domain schemas"""

from typing import Optional

from pydantic import field_validator

from ...models import ROLE_EMPLOYEE, STAFF_ROLES
from ...schemas import CamelModel, StaffResponse
from ...shared.validators import validate_email, validate_required


def _validate_role(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in STAFF_ROLES:
        raise ValueError(f"Role must be one of: {', '.join(STAFF_ROLES)}")
    return value


class ActiveStaffInput(CamelModel):
    # Identity provider org id; the kiosk passes it explicitly
    organization_id: Optional[str] = None


class StaffCreate(CamelModel):
    full_name: str
    email: Optional[str] = None
    department: Optional[str] = None
    title: Optional[str] = None
    role: str = ROLE_EMPLOYEE
    can_login: bool = False
    username: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def check_name(cls, v):
        return validate_required(v, "Full name")

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("role")
    @classmethod
    def check_role(cls, v):
        return _validate_role(v)


class StaffUpdate(CamelModel):
    id: int
    full_name: Optional[str] = None
    email: Optional[str] = None
    department: Optional[str] = None
    title: Optional[str] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None
    can_login: Optional[bool] = None
    username: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("role")
    @classmethod
    def check_role(cls, v):
        return _validate_role(v)


class StaffWithPassword(CamelModel):
    staff: StaffResponse
    temporary_password: Optional[str] = None


class PasswordResetResponse(CamelModel):
    success: bool = True
    temporary_password: str
