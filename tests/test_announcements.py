"""Tests for announcement ranking, read tracking and admin management."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from app.db.models import Announcement, AnnouncementRead, Notification
from app.db.types import utcnow
from app.services import announcement_service


def _announcement(title: str, priority: str, created_at: datetime) -> Announcement:
    return Announcement(title=title, content="...", priority=priority, created_at=created_at)


def test_rank_by_priority_then_recency():
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    ranked = announcement_service.rank_announcements([
        _announcement("old-low", "low", base),
        _announcement("new-medium", "medium", base + timedelta(days=3)),
        _announcement("old-high", "high", base),
        _announcement("new-high", "high", base + timedelta(days=1)),
        _announcement("old-medium", "medium", base + timedelta(days=2)),
    ])

    assert [a.title for a in ranked] == [
        "new-high",
        "old-high",
        "new-medium",
        "old-medium",
        "old-low",
    ]


def test_unknown_priority_ranks_last():
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    ranked = announcement_service.rank_announcements([
        _announcement("odd", "urgent", base + timedelta(days=5)),
        _announcement("low", "low", base),
    ])
    assert [a.title for a in ranked] == ["low", "odd"]


def test_active_announcements_skip_inactive_and_expired(db, test_admin):
    now = utcnow()
    db.add_all([
        Announcement(title="live", content="c", priority="low", created_by=test_admin.id),
        Announcement(title="off", content="c", priority="high", is_active=False),
        Announcement(title="expired", content="c", priority="high", expires_at=now - timedelta(hours=1)),
        Announcement(title="future", content="c", priority="medium", expires_at=now + timedelta(days=1)),
    ])
    db.commit()

    titles = [a.title for a in announcement_service.get_active_announcements(db)]

    assert titles == ["future", "live"]


def test_mark_read_is_idempotent(db, test_user, test_admin):
    announcement = Announcement(title="t", content="c", priority="low", created_by=test_admin.id)
    db.add(announcement)
    db.commit()

    announcement_service.mark_read(db, announcement.id, test_user.id)
    announcement_service.mark_read(db, announcement.id, test_user.id)

    assert db.query(AnnouncementRead).count() == 1
    assert announcement_service.get_read_ids(db, test_user.id) == [announcement.id]


def test_delete_removes_read_records(db, test_user, other_user, test_admin):
    announcement = Announcement(title="t", content="c", priority="low", created_by=test_admin.id)
    keep = Announcement(title="keep", content="c", priority="low", created_by=test_admin.id)
    db.add_all([announcement, keep])
    db.commit()
    announcement_service.mark_read(db, announcement.id, test_user.id)
    announcement_service.mark_read(db, announcement.id, other_user.id)
    announcement_service.mark_read(db, keep.id, test_user.id)

    announcement_service.delete_announcement(db, announcement.id)

    assert db.get(Announcement, announcement.id) is None
    reads = db.query(AnnouncementRead).all()
    assert [r.announcement_id for r in reads] == [keep.id]


# =============================================================================
# API
# =============================================================================


@pytest.mark.asyncio
async def test_admin_create_notifies_employees(
    admin_client: AsyncClient, db, test_user, other_user, test_admin
):
    response = await admin_client.post(
        "/admin/create-announcement",
        json={"title": "Office closed", "content": "Friday off", "priority": "high"},
    )
    assert response.status_code == 200
    announcement_id = response.json()["id"]

    notified = {n.user_id for n in db.query(Notification).filter(Notification.type == "announcement")}
    assert notified == {test_user.id, other_user.id}

    response = await admin_client.get("/admin/announcements")
    rows = response.json()
    assert rows[0]["id"] == announcement_id
    assert rows[0]["read_count"] == 0
    assert rows[0]["creator"]["id"] == str(test_admin.id)


@pytest.mark.asyncio
async def test_employee_dashboard_flow(authed_client: AsyncClient, db, test_admin):
    now = utcnow()
    low = Announcement(title="low", content="c", priority="low", created_by=test_admin.id,
                       created_at=now)
    high = Announcement(title="high", content="c", priority="high", created_by=test_admin.id,
                        created_at=now - timedelta(days=1))
    db.add_all([low, high])
    db.commit()

    response = await authed_client.get("/dashboard/announcements")
    assert [a["title"] for a in response.json()] == ["high", "low"]

    response = await authed_client.post(
        "/dashboard/mark-announcement-read", json={"announcement_id": str(high.id)}
    )
    assert response.status_code == 200

    response = await authed_client.get("/dashboard/announcement-read-ids")
    assert response.json() == [str(high.id)]


@pytest.mark.asyncio
async def test_mark_unknown_announcement_read(authed_client: AsyncClient):
    response = await authed_client.post(
        "/dashboard/mark-announcement-read",
        json={"announcement_id": "00000000-0000-0000-0000-000000000000"},
    )
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_admin_delete_announcement(admin_client: AsyncClient, db, test_admin, test_user):
    announcement = Announcement(title="t", content="c", priority="low", created_by=test_admin.id)
    db.add(announcement)
    db.commit()
    announcement_service.mark_read(db, announcement.id, test_user.id)
    announcement_id = announcement.id

    response = await admin_client.post("/admin/delete-announcement", json={"id": str(announcement_id)})
    assert response.status_code == 200
    assert db.query(AnnouncementRead).count() == 0

    response = await admin_client.post("/admin/delete-announcement", json={"id": str(announcement_id)})
    assert response.status_code == 404
