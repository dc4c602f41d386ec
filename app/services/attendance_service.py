"""Attendance aggregation for the admin dashboard."""

from collections import OrderedDict
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.constants import DEFAULT_AVERAGE_HOURS_DAYS, WEEKDAY_LABELS
from app.db.enums import LeaveStatus, TimeEntryStatus, UserRole
from app.db.models import BreakLog, LeaveApplication, TimeEntry, User
from app.db.types import as_utc, utcnow
from app.services.time_tracking_service import compute_hours, day_bounds
from app.utils.rounding import round_half_up


def entry_hours(entry: TimeEntry) -> float:
    """Stored total_hours when set and non-zero, else recomputed, else 0."""
    if entry.total_hours:
        return float(entry.total_hours)
    if entry.time_out:
        return compute_hours(entry.time_in, entry.time_out)
    return 0.0


def average_hours_by_day(
    db: Session,
    days: int = DEFAULT_AVERAGE_HOURS_DAYS,
    now: datetime | None = None,
) -> list[dict]:
    """
    Average hours per closed entry for each of the last `days` UTC days.

    Buckets are consecutive calendar days ending today; empty days report 0.
    """
    days = max(days, 1)
    now = now or utcnow()
    window_start, _ = day_bounds(now - timedelta(days=days - 1))

    buckets: OrderedDict = OrderedDict()
    for offset in range(days):
        buckets[(window_start + timedelta(days=offset)).date()] = [0.0, 0]

    entries = db.query(TimeEntry).filter(
        TimeEntry.time_in >= window_start,
        TimeEntry.time_in <= now,
        TimeEntry.status != TimeEntryStatus.ACTIVE.value,
    ).all()

    for entry in entries:
        bucket = buckets.get(entry.time_in.date())
        if bucket is None:
            continue
        bucket[0] += entry_hours(entry)
        bucket[1] += 1

    return [
        {
            "day": WEEKDAY_LABELS[day.weekday()],
            "hours": round_half_up(total / count, 1) if count else 0,
        }
        for day, (total, count) in buckets.items()
    ]


def employee_status_snapshot(db: Session, now: datetime | None = None) -> list[dict]:
    """
    Live presence for every employee account.

    on_break > timed_in > on_leave > offline, in that order of precedence.
    """
    now = now or utcnow()
    today = now.date()
    users = db.query(User).filter(
        User.role == UserRole.USER.value,
    ).order_by(User.name.asc()).all()
    user_ids = [u.id for u in users]
    if not user_ids:
        return []

    active_entries = db.query(TimeEntry).filter(
        TimeEntry.user_id.in_(user_ids),
        TimeEntry.status == TimeEntryStatus.ACTIVE.value,
    ).all()
    active_by_user: dict[UUID, TimeEntry] = {e.user_id: e for e in active_entries}

    on_break_entries: set[UUID] = set()
    if active_entries:
        on_break_entries = {
            row.time_entry_id
            for row in db.query(BreakLog.time_entry_id).filter(
                BreakLog.time_entry_id.in_([e.id for e in active_entries]),
                BreakLog.break_end.is_(None),
            )
        }

    on_leave_users = {
        row.user_id
        for row in db.query(LeaveApplication.user_id).filter(
            LeaveApplication.user_id.in_(user_ids),
            LeaveApplication.status == LeaveStatus.APPROVED.value,
            LeaveApplication.start_date <= today,
            LeaveApplication.end_date >= today,
        )
    }

    snapshot = []
    for user in users:
        entry = active_by_user.get(user.id)
        if entry:
            status = "on_break" if entry.id in on_break_entries else "timed_in"
        elif user.id in on_leave_users:
            status = "on_leave"
        else:
            status = "offline"

        snapshot.append({
            "id": user.id,
            "name": user.name,
            "designation": user.position or "Employee",
            "status": status,
            "time_in": entry.time_in if entry else None,
            "hours": f"{round_half_up(compute_hours(entry.time_in, now), 1):.1f}h" if entry else None,
        })
    return snapshot


def get_time_entries_for_all(
    db: Session,
    start_date: datetime,
    end_date: datetime,
) -> list[TimeEntry]:
    """Every user's entries with time_in inside the inclusive range."""
    return db.query(TimeEntry).filter(
        TimeEntry.time_in >= as_utc(start_date),
        TimeEntry.time_in <= as_utc(end_date),
    ).order_by(TimeEntry.time_in.desc()).all()
