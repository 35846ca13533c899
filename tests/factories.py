"""Row builders shared by the test modules"""

from datetime import datetime
from typing import Optional

from frontdesk.models import ROLE_EMPLOYEE, Organization, Staff, Visitor


def make_org(db, clerk_org_id: str = "org_1", name: str = "Acme Corp") -> Organization:
    organization = Organization(clerk_org_id=clerk_org_id, name=name, slug=name.lower().replace(" ", "-"))
    db.add(organization)
    db.commit()
    db.refresh(organization)
    return organization


def make_staff(
    db,
    organization: Organization,
    full_name: str,
    role: str = ROLE_EMPLOYEE,
    clerk_user_id: Optional[str] = None,
    email: Optional[str] = None,
    **extra,
) -> Staff:
    staff = Staff(
        organization_id=organization.id,
        full_name=full_name,
        role=role,
        clerk_user_id=clerk_user_id,
        email=email,
        can_login=clerk_user_id is not None,
        **extra,
    )
    db.add(staff)
    db.commit()
    db.refresh(staff)
    return staff


def make_visitor(db, organization: Organization, host: Staff, check_in_time: datetime, **extra) -> Visitor:
    fields = {
        "full_name": "Victor Visitor",
        "company": "Globex",
        "email": "victor@globex.test",
        "phone": "555-0100",
        "host_response_status": "pending",
    }
    fields.update(extra)
    visitor = Visitor(
        organization_id=organization.id,
        whom_to_see=host.full_name,
        host_staff_id=host.id,
        check_in_time=check_in_time,
        **fields,
    )
    db.add(visitor)
    db.commit()
    db.refresh(visitor)
    return visitor
