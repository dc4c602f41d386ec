"""
Time tracking service - the clock-in / break / clock-out state machine.

States per user: idle -> active -> (on_break <-> active) -> closed.

The store closes the races: a partial unique index allows one active
entry per user and one open break per entry, and every close is a
conditional UPDATE on the still-open row.
"""

import logging
from datetime import datetime, time, timedelta, timezone
from uuid import UUID

from sqlalchemy import and_, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.constants import DEFAULT_TRENDS_DAYS, EARLY_OUT_THRESHOLD_HOURS
from app.core.errors import bad_request
from app.db.enums import TaskStatus, TimeEntryStatus
from app.db.models import BreakLog, ProjectTask, TimeEntry
from app.db.types import as_utc, utcnow
from app.utils.rounding import round_half_up

logger = logging.getLogger(__name__)

ALREADY_CLOCKED_IN = "You are already clocked in"
NO_ACTIVE_ENTRY = "No active time entry found"
BREAK_IN_PROGRESS = "Break already in progress"
NO_ACTIVE_BREAK = "No active break found"


# =============================================================================
# Helpers
# =============================================================================


def compute_hours(time_in: datetime, time_out: datetime) -> float:
    """Unrounded hours between two instants."""
    return (time_out - time_in).total_seconds() / 3600


def classify_hours(hours: float) -> TimeEntryStatus:
    """early_out below the threshold, completed otherwise (uses unrounded hours)."""
    if hours < EARLY_OUT_THRESHOLD_HOURS:
        return TimeEntryStatus.EARLY_OUT
    return TimeEntryStatus.COMPLETED


def break_minutes(break_start: datetime, break_end: datetime) -> int:
    """Whole minutes, floored."""
    return int((break_end - break_start).total_seconds() // 60)


def day_bounds(day: datetime) -> tuple[datetime, datetime]:
    """[00:00, next 00:00) of the UTC calendar day containing `day`."""
    start = datetime.combine(as_utc(day).date(), time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


# =============================================================================
# Queries
# =============================================================================


def get_active_entry(db: Session, user_id: UUID) -> TimeEntry | None:
    return db.query(TimeEntry).filter(
        TimeEntry.user_id == user_id,
        TimeEntry.status == TimeEntryStatus.ACTIVE.value,
    ).first()


def get_open_break(db: Session, time_entry_id: UUID) -> BreakLog | None:
    return db.query(BreakLog).filter(
        BreakLog.time_entry_id == time_entry_id,
        BreakLog.break_end.is_(None),
    ).first()


def get_break_logs(db: Session, user_id: UUID) -> list[BreakLog]:
    """Breaks of the current active entry, newest first. Empty when idle."""
    entry = get_active_entry(db, user_id)
    if not entry:
        return []
    return db.query(BreakLog).filter(
        BreakLog.time_entry_id == entry.id,
    ).order_by(BreakLog.break_start.desc()).all()


def get_attendance(
    db: Session,
    user_id: UUID,
    start_date: datetime,
    end_date: datetime,
) -> list[TimeEntry]:
    """The user's entries with time_in inside [start_date, end_date], newest first."""
    return db.query(TimeEntry).filter(
        TimeEntry.user_id == user_id,
        TimeEntry.time_in >= as_utc(start_date),
        TimeEntry.time_in <= as_utc(end_date),
    ).order_by(TimeEntry.time_in.desc()).all()


def get_completed_tasks_for_day(
    db: Session,
    user_id: UUID,
    day: datetime | None = None,
) -> list[ProjectTask]:
    """
    Tasks the user completed on the given UTC day (default today).

    A task counts by completed_at, or by updated_at when completed_at
    was never recorded.
    """
    start, end = day_bounds(day or utcnow())
    return db.query(ProjectTask).options(
        joinedload(ProjectTask.project),
    ).filter(
        ProjectTask.user_id == user_id,
        ProjectTask.status == TaskStatus.COMPLETED.value,
        or_(
            and_(ProjectTask.completed_at >= start, ProjectTask.completed_at < end),
            and_(
                ProjectTask.completed_at.is_(None),
                ProjectTask.updated_at >= start,
                ProjectTask.updated_at < end,
            ),
        ),
    ).order_by(
        ProjectTask.completed_at.desc(),
        ProjectTask.updated_at.desc(),
    ).all()


def get_attendance_trends(
    db: Session,
    user_id: UUID,
    days: int = DEFAULT_TRENDS_DAYS,
    now: datetime | None = None,
) -> list[dict]:
    """One row per closed entry in the trailing window, oldest first."""
    now = now or utcnow()
    window_start, _ = day_bounds(now - timedelta(days=max(days, 1) - 1))
    entries = db.query(TimeEntry).filter(
        TimeEntry.user_id == user_id,
        TimeEntry.status != TimeEntryStatus.ACTIVE.value,
        TimeEntry.time_in >= window_start,
        TimeEntry.time_in <= now,
    ).order_by(TimeEntry.time_in.asc()).all()

    trends = []
    for entry in entries:
        if entry.total_hours:
            hours = float(entry.total_hours)
        elif entry.time_out:
            hours = round_half_up(compute_hours(entry.time_in, entry.time_out))
        else:
            hours = 0.0
        trends.append({
            "date": entry.time_in.date().isoformat(),
            "hours": hours,
            "time_in": entry.time_in,
            "time_out": entry.time_out,
        })
    return trends


# =============================================================================
# State Transitions
# =============================================================================


def clock_in(db: Session, user_id: UUID, now: datetime | None = None) -> TimeEntry:
    """Open a new active entry. Rejected if one is already open."""
    if get_active_entry(db, user_id):
        raise bad_request(ALREADY_CLOCKED_IN)

    entry = TimeEntry(
        user_id=user_id,
        time_in=now or utcnow(),
        status=TimeEntryStatus.ACTIVE.value,
    )
    db.add(entry)
    try:
        db.commit()
    except IntegrityError:
        # Lost the race to a concurrent clock-in
        db.rollback()
        raise bad_request(ALREADY_CLOCKED_IN)
    db.refresh(entry)
    logger.info("Clock-in user_id=%s entry_id=%s", user_id, entry.id)
    return entry


def clock_out(
    db: Session,
    user_id: UUID,
    notes: str | None = None,
    now: datetime | None = None,
) -> dict:
    """
    Close the active entry.

    total_hours is rounded to 2 decimals; the early_out decision uses the
    unrounded value. Any open break is closed at the same instant.
    """
    entry = get_active_entry(db, user_id)
    if not entry:
        raise bad_request(NO_ACTIVE_ENTRY)

    time_out = now or utcnow()
    hours = compute_hours(entry.time_in, time_out)
    total_hours = round_half_up(hours)
    status = classify_hours(hours)

    values = {
        "time_out": time_out,
        "total_hours": total_hours,
        "status": status.value,
        "updated_at": time_out,
    }
    if notes is not None:
        values["notes"] = notes

    result = db.execute(
        update(TimeEntry)
        .where(
            TimeEntry.id == entry.id,
            TimeEntry.status == TimeEntryStatus.ACTIVE.value,
        )
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise bad_request(NO_ACTIVE_ENTRY)

    open_break = get_open_break(db, entry.id)
    if open_break:
        _close_break(db, open_break, time_out)

    db.commit()
    logger.info(
        "Clock-out user_id=%s entry_id=%s hours=%s status=%s",
        user_id, entry.id, total_hours, status.value,
    )
    return {"success": True, "total_hours": total_hours, "status": status}


def start_break(db: Session, user_id: UUID, now: datetime | None = None) -> BreakLog:
    entry = get_active_entry(db, user_id)
    if not entry:
        raise bad_request(NO_ACTIVE_ENTRY)
    if get_open_break(db, entry.id):
        raise bad_request(BREAK_IN_PROGRESS)

    break_log = BreakLog(
        time_entry_id=entry.id,
        user_id=user_id,
        break_start=now or utcnow(),
    )
    db.add(break_log)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise bad_request(BREAK_IN_PROGRESS)
    db.refresh(break_log)
    return break_log


def end_break(db: Session, user_id: UUID, now: datetime | None = None) -> dict:
    entry = get_active_entry(db, user_id)
    if not entry:
        raise bad_request(NO_ACTIVE_ENTRY)
    open_break = get_open_break(db, entry.id)
    if not open_break:
        raise bad_request(NO_ACTIVE_BREAK)

    duration = _close_break(db, open_break, now or utcnow())
    if duration is None:
        db.rollback()
        raise bad_request(NO_ACTIVE_BREAK)
    db.commit()
    return {"success": True, "duration": duration}


def _close_break(db: Session, break_log: BreakLog, break_end: datetime) -> int | None:
    """Conditionally close an open break. Returns minutes, or None if already closed."""
    duration = break_minutes(break_log.break_start, break_end)
    result = db.execute(
        update(BreakLog)
        .where(BreakLog.id == break_log.id, BreakLog.break_end.is_(None))
        .values(break_end=break_end, duration=duration, updated_at=break_end)
        .execution_options(synchronize_session=False)
    )
    db.expire(break_log)
    if result.rowcount == 0:
        return None
    return duration
