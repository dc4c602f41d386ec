"""SQLAlchemy ORM models for employees, time tracking, HR workflows and scheduling."""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean, CheckConstraint, Date, ForeignKey, Index, Integer, Numeric,
    String, Text, UniqueConstraint, Uuid, text
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.enums import (
    DEFAULT_PRIORITY, DEFAULT_PROJECT_ROLE,
    CalendarEventType, DocumentType, FormStatus, FormType, LeaveStatus,
    LeaveType, MeetingStatus, NotificationType, Priority, ProjectSource,
    ProjectStatus, ResponseStatus, TaskStatus, TimeEntryStatus, UserRole,
    enum_values,
)
from app.db.types import utcnow


def _pk() -> Mapped[uuid.UUID]:
    return mapped_column(Uuid, primary_key=True, default=uuid.uuid4)


def _user_fk(nullable: bool = False) -> Mapped:
    return mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=nullable
    )


Money = Numeric(12, 2, asdecimal=False)


# =============================================================================
# Users
# =============================================================================

class User(Base):
    """
    Employee or administrator account.

    Login is by employee_id + bcrypt password. Admins additionally pass a
    TOTP second step (two_factor_secret is provisioned on first login).
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(f"role IN ({enum_values(UserRole)})", name="ck_users_role"),
    )

    id: Mapped[uuid.UUID] = _pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    employee_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), default=UserRole.USER.value, nullable=False
    )
    two_factor_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false"), nullable=False
    )
    two_factor_secret: Mapped[str | None] = mapped_column(String(64), nullable=True)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    department: Mapped[str | None] = mapped_column(String(255), nullable=True)
    position: Mapped[str | None] = mapped_column(String(255), nullable=True)
    token_version: Mapped[int] = mapped_column(
        Integer, default=1, server_default=text("1"), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=text("true"), nullable=False
    )
    last_signed_in: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    documents: Mapped[list["EmployeeDocument"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        foreign_keys="EmployeeDocument.user_id",
    )


class EmployeeDocument(Base):
    """
    A document on file for an employee, one per (user, document_type).

    Re-uploading the same type replaces the URL in place.
    """
    __tablename__ = "employee_documents"
    __table_args__ = (
        UniqueConstraint("user_id", "document_type", name="uq_employee_documents_user_type"),
        CheckConstraint(
            f"document_type IN ({enum_values(DocumentType)})",
            name="ck_employee_documents_type",
        ),
    )

    id: Mapped[uuid.UUID] = _pk()
    user_id: Mapped[uuid.UUID] = _user_fk()
    document_type: Mapped[str] = mapped_column(String(40), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    document_url: Mapped[str] = mapped_column(String(500), nullable=False)
    uploaded_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    user: Mapped["User"] = relationship(back_populates="documents", foreign_keys=[user_id])


# =============================================================================
# Time Tracking
# =============================================================================

class TimeEntry(Base):
    """
    One clock-in/clock-out session.

    Constraint: at most one active entry per user (partial unique index).
    """
    __tablename__ = "time_entries"
    __table_args__ = (
        Index("idx_time_entries_user_time_in", "user_id", "time_in"),
        Index(
            "uq_time_entries_one_active_per_user",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
        CheckConstraint(
            f"status IN ({enum_values(TimeEntryStatus)})", name="ck_time_entries_status"
        ),
    )

    id: Mapped[uuid.UUID] = _pk()
    user_id: Mapped[uuid.UUID] = _user_fk()
    time_in: Mapped[datetime] = mapped_column(nullable=False)
    time_out: Mapped[datetime | None] = mapped_column(nullable=True)
    total_hours: Mapped[float | None] = mapped_column(Money, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=TimeEntryStatus.ACTIVE.value, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    breaks: Mapped[list["BreakLog"]] = relationship(
        back_populates="time_entry", cascade="all, delete-orphan"
    )


class BreakLog(Base):
    """
    A break taken during a time entry; duration is whole minutes.

    Constraint: at most one open break (break_end IS NULL) per entry.
    """
    __tablename__ = "break_logs"
    __table_args__ = (
        Index(
            "uq_break_logs_one_open_per_entry",
            "time_entry_id",
            unique=True,
            postgresql_where=text("break_end IS NULL"),
            sqlite_where=text("break_end IS NULL"),
        ),
    )

    id: Mapped[uuid.UUID] = _pk()
    time_entry_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("time_entries.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = _user_fk()
    break_start: Mapped[datetime] = mapped_column(nullable=False)
    break_end: Mapped[datetime | None] = mapped_column(nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    time_entry: Mapped["TimeEntry"] = relationship(back_populates="breaks")


# =============================================================================
# Leave & Forms
# =============================================================================

class LeaveApplication(Base):
    """Leave request. Submitted by the employee, resolved by an admin."""
    __tablename__ = "leave_applications"
    __table_args__ = (
        CheckConstraint(
            f"leave_type IN ({enum_values(LeaveType)})", name="ck_leave_applications_type"
        ),
        CheckConstraint(
            f"status IN ({enum_values(LeaveStatus)})", name="ck_leave_applications_status"
        ),
    )

    id: Mapped[uuid.UUID] = _pk()
    user_id: Mapped[uuid.UUID] = _user_fk()
    leave_type: Mapped[str] = mapped_column(String(20), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=LeaveStatus.PENDING.value, nullable=False
    )
    approved_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    approved_at: Mapped[datetime | None] = mapped_column(nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    user: Mapped["User"] = relationship(foreign_keys=[user_id])


class FormSubmission(Base):
    """Resignation / grievance / feedback form. Resolved by an admin."""
    __tablename__ = "form_submissions"
    __table_args__ = (
        CheckConstraint(
            f"form_type IN ({enum_values(FormType)})", name="ck_form_submissions_type"
        ),
        CheckConstraint(
            f"status IN ({enum_values(FormStatus)})", name="ck_form_submissions_status"
        ),
    )

    id: Mapped[uuid.UUID] = _pk()
    user_id: Mapped[uuid.UUID] = _user_fk()
    form_type: Mapped[str] = mapped_column(String(20), nullable=False)
    subject: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    priority: Mapped[str] = mapped_column(
        String(10), default=DEFAULT_PRIORITY.value, nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), default=FormStatus.SUBMITTED.value, nullable=False
    )
    responded_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    response: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    user: Mapped["User"] = relationship(foreign_keys=[user_id])


# =============================================================================
# Chat
# =============================================================================

class ChatMessage(Base):
    """Direct message, or a broadcast to everyone when recipient_id is NULL."""
    __tablename__ = "chat_messages"
    __table_args__ = (
        Index("idx_chat_messages_created", "created_at"),
    )

    id: Mapped[uuid.UUID] = _pk()
    sender_id: Mapped[uuid.UUID] = _user_fk()
    recipient_id: Mapped[uuid.UUID | None] = _user_fk(nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    sender: Mapped["User"] = relationship(foreign_keys=[sender_id])


# =============================================================================
# Payroll & Announcements
# =============================================================================

class Payslip(Base):
    """Monthly payroll snapshot for one employee."""
    __tablename__ = "payslips"
    __table_args__ = (
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_payslips_month"),
        Index("idx_payslips_user_period", "user_id", "year", "month"),
    )

    id: Mapped[uuid.UUID] = _pk()
    user_id: Mapped[uuid.UUID] = _user_fk()
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    basic_salary: Mapped[float] = mapped_column(Money, nullable=False)
    allowances: Mapped[float] = mapped_column(Money, default=0, nullable=False)
    deductions: Mapped[float] = mapped_column(Money, default=0, nullable=False)
    net_salary: Mapped[float] = mapped_column(Money, nullable=False)
    working_days: Mapped[int] = mapped_column(Integer, nullable=False)
    present_days: Mapped[int] = mapped_column(Integer, nullable=False)
    paid_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    user: Mapped["User"] = relationship(foreign_keys=[user_id])


class Announcement(Base):
    """Company-wide announcement ranked by priority, then recency."""
    __tablename__ = "announcements"
    __table_args__ = (
        CheckConstraint(
            f"priority IN ({enum_values(Priority)})", name="ck_announcements_priority"
        ),
    )

    id: Mapped[uuid.UUID] = _pk()
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    priority: Mapped[str] = mapped_column(
        String(10), default=DEFAULT_PRIORITY.value, nullable=False
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=text("true"), nullable=False
    )
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    expires_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    creator: Mapped["User | None"] = relationship(foreign_keys=[created_by])
    reads: Mapped[list["AnnouncementRead"]] = relationship(
        back_populates="announcement", cascade="all, delete-orphan"
    )


class AnnouncementRead(Base):
    """Read receipt: one row per (announcement, user)."""
    __tablename__ = "announcement_reads"
    __table_args__ = (
        UniqueConstraint("announcement_id", "user_id", name="uq_announcement_reads"),
    )

    id: Mapped[uuid.UUID] = _pk()
    announcement_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("announcements.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = _user_fk()
    read_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    announcement: Mapped["Announcement"] = relationship(back_populates="reads")


# =============================================================================
# Projects
# =============================================================================

class Project(Base):
    """Project assigned by an admin (team_lead) or self-created by an employee."""
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint(f"status IN ({enum_values(ProjectStatus)})", name="ck_projects_status"),
        CheckConstraint(f"source IN ({enum_values(ProjectSource)})", name="ck_projects_source"),
    )

    id: Mapped[uuid.UUID] = _pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=ProjectStatus.ACTIVE.value, nullable=False
    )
    priority: Mapped[str] = mapped_column(
        String(10), default=DEFAULT_PRIORITY.value, nullable=False
    )
    source: Mapped[str] = mapped_column(
        String(20), default=ProjectSource.TEAM_LEAD.value, nullable=False
    )
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    assignments: Mapped[list["ProjectAssignment"]] = relationship(
        back_populates="project", cascade="all, delete-orphan"
    )
    tasks: Mapped[list["ProjectTask"]] = relationship(
        back_populates="project", cascade="all, delete-orphan"
    )


class ProjectAssignment(Base):
    __tablename__ = "project_assignments"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_assignments"),
    )

    id: Mapped[uuid.UUID] = _pk()
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = _user_fk()
    role: Mapped[str] = mapped_column(
        String(50), default=DEFAULT_PROJECT_ROLE, nullable=False
    )
    assigned_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    project: Mapped["Project"] = relationship(back_populates="assignments")
    user: Mapped["User"] = relationship(foreign_keys=[user_id])


class ProjectTask(Base):
    """A task logged by an employee against a project (optionally a time entry)."""
    __tablename__ = "project_tasks"
    __table_args__ = (
        Index("idx_project_tasks_user_status", "user_id", "status"),
        CheckConstraint(f"status IN ({enum_values(TaskStatus)})", name="ck_project_tasks_status"),
    )

    id: Mapped[uuid.UUID] = _pk()
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = _user_fk()
    time_entry_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("time_entries.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=TaskStatus.TODO.value, nullable=False
    )
    priority: Mapped[str] = mapped_column(
        String(10), default=DEFAULT_PRIORITY.value, nullable=False
    )
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    project: Mapped["Project"] = relationship(back_populates="tasks")
    user: Mapped["User"] = relationship(foreign_keys=[user_id])


# =============================================================================
# Notifications
# =============================================================================

class Notification(Base):
    """Per-user in-app notification."""
    __tablename__ = "notifications"
    __table_args__ = (
        Index("idx_notifications_user_unread", "user_id", "is_read"),
        CheckConstraint(
            f"type IN ({enum_values(NotificationType)})", name="ck_notifications_type"
        ),
    )

    id: Mapped[uuid.UUID] = _pk()
    user_id: Mapped[uuid.UUID] = _user_fk()
    type: Mapped[str] = mapped_column(String(40), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    priority: Mapped[str] = mapped_column(
        String(10), default=DEFAULT_PRIORITY.value, nullable=False
    )
    is_read: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false"), nullable=False
    )
    related_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    related_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )


# =============================================================================
# Meetings & Calendar
# =============================================================================

class Meeting(Base):
    """Meeting with exactly one organizer and any number of participants."""
    __tablename__ = "meetings"
    __table_args__ = (
        Index("idx_meetings_start_time", "start_time"),
        CheckConstraint(f"status IN ({enum_values(MeetingStatus)})", name="ck_meetings_status"),
    )

    id: Mapped[uuid.UUID] = _pk()
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    agenda: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_time: Mapped[datetime] = mapped_column(nullable=False)
    end_time: Mapped[datetime] = mapped_column(nullable=False)
    location: Mapped[str | None] = mapped_column(String(500), nullable=True)
    meeting_link: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    organizer_id: Mapped[uuid.UUID] = _user_fk()
    status: Mapped[str] = mapped_column(
        String(20), default=MeetingStatus.SCHEDULED.value, nullable=False
    )
    meeting_minutes: Mapped[str | None] = mapped_column(Text, nullable=True)
    action_items: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    participants: Mapped[list["MeetingParticipant"]] = relationship(
        back_populates="meeting", cascade="all, delete-orphan"
    )


class MeetingParticipant(Base):
    __tablename__ = "meeting_participants"
    __table_args__ = (
        UniqueConstraint("meeting_id", "user_id", name="uq_meeting_participants"),
        CheckConstraint(
            f"response_status IN ({enum_values(ResponseStatus)})",
            name="ck_meeting_participants_response",
        ),
    )

    id: Mapped[uuid.UUID] = _pk()
    meeting_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("meetings.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = _user_fk()
    response_status: Mapped[str] = mapped_column(
        String(20), default=ResponseStatus.PENDING.value, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    meeting: Mapped["Meeting"] = relationship(back_populates="participants")
    user: Mapped["User"] = relationship(foreign_keys=[user_id])


class CalendarEvent(Base):
    """Personal calendar entry owned by one user."""
    __tablename__ = "calendar_events"
    __table_args__ = (
        Index("idx_calendar_events_user_start", "user_id", "start_time"),
        CheckConstraint(
            f"event_type IN ({enum_values(CalendarEventType)})",
            name="ck_calendar_events_type",
        ),
    )

    id: Mapped[uuid.UUID] = _pk()
    user_id: Mapped[uuid.UUID] = _user_fk()
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    event_type: Mapped[str] = mapped_column(String(20), nullable=False)
    start_time: Mapped[datetime] = mapped_column(nullable=False)
    end_time: Mapped[datetime | None] = mapped_column(nullable=True)
    is_all_day: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )
