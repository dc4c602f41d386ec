"""Enum definitions for application constants."""

from enum import Enum


class UserRole(str, Enum):
    """
    Account roles.

    - USER: regular employee
    - ADMIN: HR / administrator (must pass TOTP two-factor at login)
    """
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


class TimeEntryStatus(str, Enum):
    """
    Time entry lifecycle.

    active → completed | early_out (closed on clock-out)
    """
    ACTIVE = "active"
    COMPLETED = "completed"
    EARLY_OUT = "early_out"


class LeaveType(str, Enum):
    SICK = "sick"
    CASUAL = "casual"
    ANNUAL = "annual"
    UNPAID = "unpaid"
    OTHER = "other"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class FormType(str, Enum):
    RESIGNATION = "resignation"
    LEAVE = "leave"
    GRIEVANCE = "grievance"
    FEEDBACK = "feedback"


class FormStatus(str, Enum):
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    RESOLVED = "resolved"
    CLOSED = "closed"


class Priority(str, Enum):
    """Shared low/medium/high priority for forms, announcements, projects, tasks and notifications."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProjectSource(str, Enum):
    """Who created the project: assigned by a team lead (admin) or self-created by an employee."""
    TEAM_LEAD = "team_lead"
    EMPLOYEE = "employee"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class NotificationType(str, Enum):
    PROJECT_ASSIGNED = "project_assigned"
    ATTENDANCE_ISSUE = "attendance_issue"
    HOURS_SHORTFALL = "hours_shortfall"
    LEAVE_APPROVED = "leave_approved"
    LEAVE_REJECTED = "leave_rejected"
    ANNOUNCEMENT = "announcement"
    SYSTEM_ALERT = "system_alert"


class DocumentType(str, Enum):
    OFFER_LETTER = "offer_letter"
    CONTRACT = "contract"
    ID_PROOF = "id_proof"
    ID_PROOF_FRONT = "id_proof_front"
    ID_PROOF_BACK = "id_proof_back"
    POLICY_ACKNOWLEDGMENT = "policy_acknowledgment"
    OTHER = "other"


class MeetingStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ResponseStatus(str, Enum):
    """Meeting participant RSVP."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    TENTATIVE = "tentative"


class CalendarEventType(str, Enum):
    REMINDER = "reminder"
    PERSONAL = "personal"
    DEADLINE = "deadline"
    HOLIDAY = "holiday"


# Defaults
DEFAULT_PRIORITY = Priority.MEDIUM
DEFAULT_PROJECT_ROLE = "member"


def enum_values(enum_cls: type[Enum]) -> str:
    """Render enum values for a CHECK constraint: 'a', 'b', 'c'."""
    return ", ".join(f"'{member.value}'" for member in enum_cls)
