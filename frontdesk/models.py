from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Staff roles
ROLE_ADMIN = "Admin"
ROLE_RECEPTIONIST = "Receptionist"
ROLE_EMPLOYEE = "Employee"
ROLE_IT_STAFF = "IT Staff"
STAFF_ROLES = [ROLE_EMPLOYEE, ROLE_RECEPTIONIST, ROLE_ADMIN, ROLE_IT_STAFF]

# Host response states for a visitor
RESPONSE_PENDING = "pending"
RESPONSE_ACCEPTED = "accepted"
RESPONSE_DECLINED = "declined"


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True, index=True)
    clerk_org_id = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False)
    # Branding / contact settings
    logo_url = Column(String(500), nullable=True)
    primary_color = Column(String(7), nullable=True)  # e.g., #RRGGBB
    secondary_color = Column(String(7), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    website = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    staff = relationship("Staff", back_populates="organization")


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)
    # Identity provider account; one account maps to at most one staff row
    clerk_user_id = Column(String(255), unique=True, index=True, nullable=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    department = Column(String(255), nullable=True)
    title = Column(String(255), nullable=True)
    role = Column(String(50), default=ROLE_EMPLOYEE, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    can_login = Column(Boolean, default=False, nullable=False)
    username = Column(String(255), nullable=True)
    # Notification preferences
    notify_email = Column(Boolean, default=True, nullable=False)
    notify_sms = Column(Boolean, default=False, nullable=False)
    notify_on_visitor_arrival = Column(Boolean, default=True, nullable=False)
    # Calendar integrations (token JSON is Fernet-encrypted)
    google_calendar_connected = Column(Boolean, default=False, nullable=False)
    google_calendar_token = Column(Text, nullable=True)
    google_calendar_refresh_token = Column(Text, nullable=True)
    outlook_calendar_connected = Column(Boolean, default=False, nullable=False)
    outlook_calendar_token = Column(Text, nullable=True)
    outlook_calendar_refresh_token = Column(Text, nullable=True)
    custom_calendar_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    organization = relationship("Organization", back_populates="staff")


class Receptionist(Base):
    __tablename__ = "receptionists"

    id = Column(Integer, primary_key=True, index=True)
    clerk_user_id = Column(String(255), unique=True, index=True, nullable=False)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Visitor(Base):
    __tablename__ = "visitors"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    full_name = Column(String(255), nullable=False)
    company = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    photo_url = Column(String(500), nullable=True)
    whom_to_see = Column(String(255), nullable=False)
    reason_for_visit = Column(Text, nullable=True)
    host_staff_id = Column(Integer, ForeignKey("staff.id", ondelete="SET NULL"), nullable=True)
    receptionist_id = Column(Integer, ForeignKey("receptionists.id"), nullable=True)
    meeting_id = Column(Integer, ForeignKey("meetings.id", ondelete="SET NULL"), nullable=True)
    check_in_time = Column(DateTime, nullable=False, index=True)
    check_out_time = Column(DateTime, nullable=True)
    host_response_status = Column(String(20), default=RESPONSE_PENDING, nullable=True)
    host_response_time = Column(DateTime, nullable=True)
    host_response_note = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    host = relationship("Staff")
    receptionist = relationship("Receptionist")
    meeting = relationship("Meeting", back_populates="visitors")
    check_in_logs = relationship(
        "CheckInLog", back_populates="visitor", cascade="all, delete-orphan", order_by="CheckInLog.timestamp"
    )


class CheckInLog(Base):
    __tablename__ = "check_in_logs"

    id = Column(Integer, primary_key=True, index=True)
    visitor_id = Column(Integer, ForeignKey("visitors.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False)  # CHECKED_IN, CHECKED_OUT
    timestamp = Column(DateTime, nullable=False)

    visitor = relationship("Visitor", back_populates="check_in_logs")


class CompanySuggestion(Base):
    __tablename__ = "company_suggestions"
    __table_args__ = (UniqueConstraint("organization_id", "normalized_name", name="uq_company_org_name"),)

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    normalized_name = Column(String(255), nullable=False, index=True)
    use_count = Column(Integer, default=1, nullable=False)
    last_used = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    ticket_number = Column(String(32), unique=True, index=True, nullable=False)  # TKT-YYYYMMDD-NNN
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    priority = Column(String(20), default="Medium", nullable=False)
    category = Column(String(50), nullable=True)
    status = Column(String(20), default="Open", nullable=False)
    created_by_id = Column(Integer, ForeignKey("staff.id"), nullable=False)
    assigned_to_id = Column(Integer, ForeignKey("staff.id"), nullable=True)
    resolution = Column(Text, nullable=True)
    resolved_at = Column(DateTime, nullable=True)
    closed_at = Column(DateTime, nullable=True)
    converted_to_project = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    created_by = relationship("Staff", foreign_keys=[created_by_id])
    assigned_to = relationship("Staff", foreign_keys=[assigned_to_id])
    messages = relationship(
        "TicketMessage",
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="TicketMessage.created_at",
    )
    project = relationship("Project", back_populates="ticket", uselist=False)


class TicketMessage(Base):
    __tablename__ = "ticket_messages"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("staff.id"), nullable=False)
    message = Column(Text, nullable=False)
    is_internal = Column(Boolean, default=False, nullable=False)  # IT-only note
    created_at = Column(DateTime, server_default=func.now())

    ticket = relationship("Ticket", back_populates="messages")
    sender = relationship("Staff")


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(30), default="To Do", nullable=False)
    priority = Column(String(20), default="Medium", nullable=False)
    created_by_id = Column(Integer, ForeignKey("staff.id"), nullable=False)
    assigned_to_id = Column(Integer, ForeignKey("staff.id"), nullable=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="SET NULL"), unique=True, nullable=True)
    due_date = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    created_by = relationship("Staff", foreign_keys=[created_by_id])
    assigned_to = relationship("Staff", foreign_keys=[assigned_to_id])
    ticket = relationship("Ticket", back_populates="project")
    columns = relationship(
        "ProjectColumn",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectColumn.order",
    )
    tasks = relationship("ProjectTask", back_populates="project", cascade="all, delete-orphan")


class ProjectColumn(Base):
    __tablename__ = "project_columns"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    color = Column(String(7), default="#3b82f6", nullable=False)
    order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    project = relationship("Project", back_populates="columns")
    tasks = relationship("ProjectTask", back_populates="column", order_by="ProjectTask.order")


class ProjectTask(Base):
    __tablename__ = "project_tasks"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    column_id = Column(Integer, ForeignKey("project_columns.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(String(20), default="Medium", nullable=False)
    assigned_to_id = Column(Integer, ForeignKey("staff.id"), nullable=True)
    due_date = Column(DateTime, nullable=True)
    order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    project = relationship("Project", back_populates="tasks")
    column = relationship("ProjectColumn", back_populates="tasks")
    assigned_to = relationship("Staff")


class Meeting(Base):
    __tablename__ = "meetings"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    host_id = Column(Integer, ForeignKey("staff.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    location = Column(String(255), nullable=True)
    status = Column(String(20), default="scheduled", nullable=False)
    expected_visitors = Column(JSON, default=list, nullable=False)  # names or emails
    google_calendar_event_id = Column(String(255), nullable=True)
    outlook_calendar_event_id = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    host = relationship("Staff")
    visitors = relationship("Visitor", back_populates="meeting")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    # Identity provider ids, so badges can be filtered without a staff lookup
    organization_id = Column(String(255), nullable=False, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id", ondelete="SET NULL"), nullable=True)
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    related_id = Column(String(255), nullable=True)
    related_type = Column(String(50), nullable=True)
    action_url = Column(String(500), nullable=True)
    meta = Column("metadata", JSON, nullable=True)
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    read_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), index=True)
