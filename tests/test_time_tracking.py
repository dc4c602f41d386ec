"""Tests for the clock-in / break / clock-out state machine."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError

from app.core.errors import ErrorCode, ProcedureError
from app.db.enums import TimeEntryStatus
from app.db.models import BreakLog, TimeEntry
from app.services import time_tracking_service


T0 = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)


# =============================================================================
# Service
# =============================================================================


def test_clock_out_full_day_is_completed(db, test_user):
    time_tracking_service.clock_in(db, test_user.id, now=T0)
    result = time_tracking_service.clock_out(db, test_user.id, now=T0 + timedelta(hours=8))

    assert result["total_hours"] == 8.0
    assert result["status"] == TimeEntryStatus.COMPLETED

    entry = db.query(TimeEntry).filter(TimeEntry.user_id == test_user.id).one()
    assert entry.status == "completed"
    assert entry.total_hours == 8.0
    assert entry.time_out == T0 + timedelta(hours=8)


def test_clock_out_short_day_is_early_out(db, test_user):
    time_tracking_service.clock_in(db, test_user.id, now=T0)
    result = time_tracking_service.clock_out(
        db, test_user.id, now=T0 + timedelta(hours=3, minutes=12)
    )

    assert result["total_hours"] == 3.2
    assert result["status"] == TimeEntryStatus.EARLY_OUT


def test_early_out_threshold_is_inclusive(db, test_user):
    time_tracking_service.clock_in(db, test_user.id, now=T0)
    result = time_tracking_service.clock_out(
        db, test_user.id, now=T0 + timedelta(hours=6, minutes=30)
    )

    assert result["total_hours"] == 6.5
    assert result["status"] == TimeEntryStatus.COMPLETED


def test_early_out_uses_unrounded_hours(db, test_user):
    """6h29m50s rounds to 6.5 but is still below the threshold."""
    time_tracking_service.clock_in(db, test_user.id, now=T0)
    result = time_tracking_service.clock_out(
        db, test_user.id, now=T0 + timedelta(hours=6, minutes=29, seconds=50)
    )

    assert result["total_hours"] == 6.5
    assert result["status"] == TimeEntryStatus.EARLY_OUT


def test_second_clock_in_rejected(db, test_user):
    time_tracking_service.clock_in(db, test_user.id, now=T0)

    with pytest.raises(ProcedureError) as exc:
        time_tracking_service.clock_in(db, test_user.id, now=T0 + timedelta(minutes=5))

    assert exc.value.code == ErrorCode.BAD_REQUEST
    assert exc.value.detail == time_tracking_service.ALREADY_CLOCKED_IN
    assert db.query(TimeEntry).filter(TimeEntry.user_id == test_user.id).count() == 1


def test_clock_in_after_clock_out_opens_new_entry(db, test_user):
    time_tracking_service.clock_in(db, test_user.id, now=T0)
    time_tracking_service.clock_out(db, test_user.id, now=T0 + timedelta(hours=2))
    time_tracking_service.clock_in(db, test_user.id, now=T0 + timedelta(hours=3))

    assert db.query(TimeEntry).filter(TimeEntry.user_id == test_user.id).count() == 2
    active = time_tracking_service.get_active_entry(db, test_user.id)
    assert active.time_in == T0 + timedelta(hours=3)


def test_store_allows_only_one_active_entry(db, test_user):
    db.add(TimeEntry(user_id=test_user.id, time_in=T0, status="active"))
    db.commit()
    db.add(TimeEntry(user_id=test_user.id, time_in=T0, status="active"))

    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_clock_out_without_entry_rejected(db, test_user):
    with pytest.raises(ProcedureError) as exc:
        time_tracking_service.clock_out(db, test_user.id)
    assert exc.value.detail == time_tracking_service.NO_ACTIVE_ENTRY


def test_break_duration_is_floored_minutes(db, test_user):
    time_tracking_service.clock_in(db, test_user.id, now=T0)
    time_tracking_service.start_break(db, test_user.id, now=T0 + timedelta(hours=1))

    result = time_tracking_service.end_break(
        db, test_user.id, now=T0 + timedelta(hours=1, minutes=14, seconds=59)
    )

    assert result == {"success": True, "duration": 14}


def test_break_requires_active_entry(db, test_user):
    with pytest.raises(ProcedureError) as exc:
        time_tracking_service.start_break(db, test_user.id)
    assert exc.value.detail == time_tracking_service.NO_ACTIVE_ENTRY


def test_second_break_rejected_while_open(db, test_user):
    time_tracking_service.clock_in(db, test_user.id, now=T0)
    time_tracking_service.start_break(db, test_user.id, now=T0 + timedelta(minutes=30))

    with pytest.raises(ProcedureError) as exc:
        time_tracking_service.start_break(db, test_user.id, now=T0 + timedelta(minutes=31))
    assert exc.value.detail == time_tracking_service.BREAK_IN_PROGRESS


def test_end_break_without_open_break_rejected(db, test_user):
    time_tracking_service.clock_in(db, test_user.id, now=T0)

    with pytest.raises(ProcedureError) as exc:
        time_tracking_service.end_break(db, test_user.id)
    assert exc.value.detail == time_tracking_service.NO_ACTIVE_BREAK


def test_clock_out_closes_open_break(db, test_user):
    time_tracking_service.clock_in(db, test_user.id, now=T0)
    time_tracking_service.start_break(db, test_user.id, now=T0 + timedelta(hours=4))
    time_tracking_service.clock_out(db, test_user.id, now=T0 + timedelta(hours=4, minutes=20))

    break_log = db.query(BreakLog).filter(BreakLog.user_id == test_user.id).one()
    assert break_log.break_end == T0 + timedelta(hours=4, minutes=20)
    assert break_log.duration == 20


def test_break_logs_cover_current_entry_only(db, test_user):
    time_tracking_service.clock_in(db, test_user.id, now=T0)
    time_tracking_service.start_break(db, test_user.id, now=T0 + timedelta(hours=1))
    time_tracking_service.end_break(db, test_user.id, now=T0 + timedelta(hours=1, minutes=5))
    time_tracking_service.clock_out(db, test_user.id, now=T0 + timedelta(hours=2))

    assert time_tracking_service.get_break_logs(db, test_user.id) == []

    time_tracking_service.clock_in(db, test_user.id, now=T0 + timedelta(hours=3))
    time_tracking_service.start_break(db, test_user.id, now=T0 + timedelta(hours=4))
    time_tracking_service.end_break(db, test_user.id, now=T0 + timedelta(hours=4, minutes=1))
    time_tracking_service.start_break(db, test_user.id, now=T0 + timedelta(hours=5))

    logs = time_tracking_service.get_break_logs(db, test_user.id)
    assert len(logs) == 2
    assert logs[0].break_start > logs[1].break_start
    assert logs[0].break_end is None


def test_total_hours_rounds_ties_up(db, test_user):
    """8h07m30s is exactly 8.125h."""
    time_tracking_service.clock_in(db, test_user.id, now=T0)
    result = time_tracking_service.clock_out(
        db, test_user.id, now=T0 + timedelta(hours=8, minutes=7, seconds=30)
    )

    assert result["total_hours"] == 8.13
    entry = db.query(TimeEntry).filter(TimeEntry.user_id == test_user.id).one()
    assert entry.total_hours == 8.13


# =============================================================================
# Lost races (pre-check passes, the store rejects the write)
# =============================================================================


def test_racing_clock_in_hits_unique_index(db, test_user, monkeypatch):
    time_tracking_service.clock_in(db, test_user.id, now=T0)
    monkeypatch.setattr(time_tracking_service, "get_active_entry", lambda *_: None)

    with pytest.raises(ProcedureError) as exc:
        time_tracking_service.clock_in(db, test_user.id, now=T0 + timedelta(seconds=1))

    assert exc.value.code == ErrorCode.BAD_REQUEST
    assert exc.value.detail == time_tracking_service.ALREADY_CLOCKED_IN
    active = db.query(TimeEntry).filter(
        TimeEntry.user_id == test_user.id,
        TimeEntry.status == "active",
    ).count()
    assert active == 1


def test_racing_clock_out_closes_entry_once(db, test_user, monkeypatch):
    entry = time_tracking_service.clock_in(db, test_user.id, now=T0)
    time_tracking_service.clock_out(db, test_user.id, now=T0 + timedelta(hours=8))
    # A second request that read the entry while it was still active
    monkeypatch.setattr(time_tracking_service, "get_active_entry", lambda *_: entry)

    with pytest.raises(ProcedureError) as exc:
        time_tracking_service.clock_out(db, test_user.id, now=T0 + timedelta(hours=9))

    assert exc.value.code == ErrorCode.BAD_REQUEST
    assert exc.value.detail == time_tracking_service.NO_ACTIVE_ENTRY
    db.refresh(entry)
    assert entry.total_hours == 8.0
    assert entry.time_out == T0 + timedelta(hours=8)


def test_racing_start_break_hits_unique_index(db, test_user, monkeypatch):
    time_tracking_service.clock_in(db, test_user.id, now=T0)
    time_tracking_service.start_break(db, test_user.id, now=T0 + timedelta(hours=1))
    monkeypatch.setattr(time_tracking_service, "get_open_break", lambda *_: None)

    with pytest.raises(ProcedureError) as exc:
        time_tracking_service.start_break(db, test_user.id, now=T0 + timedelta(hours=1, seconds=1))

    assert exc.value.code == ErrorCode.BAD_REQUEST
    assert exc.value.detail == time_tracking_service.BREAK_IN_PROGRESS
    open_breaks = db.query(BreakLog).filter(
        BreakLog.user_id == test_user.id,
        BreakLog.break_end.is_(None),
    ).count()
    assert open_breaks == 1


def test_racing_end_break_closes_break_once(db, test_user, monkeypatch):
    time_tracking_service.clock_in(db, test_user.id, now=T0)
    break_log = time_tracking_service.start_break(db, test_user.id, now=T0 + timedelta(hours=1))
    time_tracking_service.end_break(db, test_user.id, now=T0 + timedelta(hours=1, minutes=10))
    monkeypatch.setattr(time_tracking_service, "get_open_break", lambda *_: break_log)

    with pytest.raises(ProcedureError) as exc:
        time_tracking_service.end_break(db, test_user.id, now=T0 + timedelta(hours=2))

    assert exc.value.code == ErrorCode.BAD_REQUEST
    assert exc.value.detail == time_tracking_service.NO_ACTIVE_BREAK
    db.refresh(break_log)
    assert break_log.duration == 10
    assert break_log.break_end == T0 + timedelta(hours=1, minutes=10)


def test_trends_lists_closed_entries_oldest_first(db, test_user):
    now = datetime(2026, 1, 9, 20, 0, tzinfo=timezone.utc)
    for day, hours in ((6, 7.5), (8, 5.0)):
        start = datetime(2026, 1, day, 9, 0, tzinfo=timezone.utc)
        time_tracking_service.clock_in(db, test_user.id, now=start)
        time_tracking_service.clock_out(db, test_user.id, now=start + timedelta(hours=hours))
    time_tracking_service.clock_in(db, test_user.id, now=now - timedelta(hours=1))

    trends = time_tracking_service.get_attendance_trends(db, test_user.id, days=30, now=now)

    assert [(t["date"], t["hours"]) for t in trends] == [
        ("2026-01-06", 7.5),
        ("2026-01-08", 5.0),
    ]


# =============================================================================
# API
# =============================================================================


@pytest.mark.asyncio
async def test_clock_in_and_out_via_api(authed_client: AsyncClient):
    response = await authed_client.post("/time-tracking/clock-in")
    assert response.status_code == 200
    assert response.json() == {"success": True}

    response = await authed_client.get("/time-tracking/active")
    assert response.status_code == 200
    assert response.json()["status"] == "active"

    response = await authed_client.post("/time-tracking/clock-out", json={"notes": "done"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["status"] == "early_out"
    assert data["total_hours"] == 0.0

    response = await authed_client.get("/time-tracking/active")
    assert response.json() is None


@pytest.mark.asyncio
async def test_double_clock_in_returns_bad_request(authed_client: AsyncClient):
    await authed_client.post("/time-tracking/clock-in")
    response = await authed_client.post("/time-tracking/clock-in")

    assert response.status_code == 400
    assert response.json() == {
        "detail": "You are already clocked in",
        "code": "BAD_REQUEST",
    }


@pytest.mark.asyncio
async def test_breaks_via_api(authed_client: AsyncClient):
    await authed_client.post("/time-tracking/clock-in")

    response = await authed_client.post("/time-tracking/start-break")
    assert response.status_code == 200

    response = await authed_client.get("/time-tracking/break-logs")
    assert len(response.json()) == 1

    response = await authed_client.post("/time-tracking/end-break")
    assert response.status_code == 200
    assert response.json()["duration"] == 0


@pytest.mark.asyncio
async def test_clock_in_requires_csrf_header(authed_client: AsyncClient):
    response = await authed_client.post(
        "/time-tracking/clock-in",
        headers={"X-Requested-With": ""},
    )
    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_clock_in_requires_session(client: AsyncClient):
    response = await client.post("/time-tracking/clock-in")
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_attendance_range(authed_client: AsyncClient, db, test_user):
    time_tracking_service.clock_in(db, test_user.id, now=T0)
    time_tracking_service.clock_out(db, test_user.id, now=T0 + timedelta(hours=7))

    response = await authed_client.get(
        "/time-tracking/attendance",
        params={"start_date": "2026-01-05T00:00:00Z", "end_date": "2026-01-05T23:59:59Z"},
    )
    assert response.status_code == 200
    entries = response.json()
    assert len(entries) == 1
    assert entries[0]["total_hours"] == 7.0

    response = await authed_client.get(
        "/time-tracking/attendance",
        params={"start_date": "2026-01-06T00:00:00Z", "end_date": "2026-01-07T00:00:00Z"},
    )
    assert response.json() == []


@pytest.mark.asyncio
async def test_attendance_requires_dates(authed_client: AsyncClient):
    response = await authed_client.get("/time-tracking/attendance")
    assert response.status_code == 400
    assert response.json()["code"] == "BAD_REQUEST"


@pytest.mark.asyncio
async def test_trends_endpoint(authed_client: AsyncClient):
    response = await authed_client.get("/time-tracking/trends", params={"days": 7})
    assert response.status_code == 200
    assert response.json() == []

    response = await authed_client.get("/time-tracking/trends", params={"days": 0})
    assert response.status_code == 400
