"""Tests for in-app notifications."""

import uuid

import pytest
from httpx import AsyncClient

from app.db.enums import NotificationType
from app.db.models import Notification
from app.services import notification_service


def _notify(db, user_id, title="Hello"):
    return notification_service.create_notification(
        db,
        user_id=user_id,
        type=NotificationType.SYSTEM_ALERT,
        title=title,
        message="Body",
        push=False,
    )


def test_unread_count_and_mark_all(db, test_user, other_user):
    _notify(db, test_user.id)
    _notify(db, test_user.id)
    _notify(db, other_user.id)

    assert notification_service.get_unread_count(db, test_user.id) == 2
    assert notification_service.mark_all_read(db, test_user.id) == 2
    assert notification_service.get_unread_count(db, test_user.id) == 0
    assert notification_service.get_unread_count(db, other_user.id) == 1


def test_failed_fan_out_is_logged_not_raised(db, caplog):
    # Invalid type fails before anything is written
    notification_service._notify_safely(
        db,
        user_id=uuid.uuid4(),
        type="not-a-type",
        title="t",
        message="m",
    )

    assert db.query(Notification).count() == 0
    assert "notification fan-out failed" in caplog.text


@pytest.mark.asyncio
async def test_list_is_scoped_to_owner(authed_client: AsyncClient, db, test_user, other_user):
    _notify(db, test_user.id, title="mine")
    _notify(db, other_user.id, title="theirs")

    response = await authed_client.get("/notifications/all")

    assert response.status_code == 200
    assert [n["title"] for n in response.json()] == ["mine"]
    assert (await authed_client.get("/notifications/unread-count")).json() == 1


@pytest.mark.asyncio
async def test_mark_as_read(authed_client: AsyncClient, db, test_user):
    notification = _notify(db, test_user.id)

    response = await authed_client.post(
        "/notifications/mark-as-read",
        json={"notification_id": str(notification.id)},
    )

    assert response.status_code == 200
    assert (await authed_client.get("/notifications/unread-count")).json() == 0


@pytest.mark.asyncio
async def test_cannot_touch_someone_elses_notification(
    authed_client: AsyncClient, db, other_user
):
    notification = _notify(db, other_user.id)
    body = {"notification_id": str(notification.id)}

    assert (await authed_client.post("/notifications/mark-as-read", json=body)).status_code == 404
    assert (await authed_client.post("/notifications/delete", json=body)).status_code == 404
    assert db.query(Notification).count() == 1


@pytest.mark.asyncio
async def test_mark_all_and_delete(authed_client: AsyncClient, db, test_user):
    first = _notify(db, test_user.id)
    _notify(db, test_user.id)

    response = await authed_client.post("/notifications/mark-all-as-read")
    assert response.status_code == 200
    assert (await authed_client.get("/notifications/unread-count")).json() == 0

    response = await authed_client.post(
        "/notifications/delete",
        json={"notification_id": str(first.id)},
    )
    assert response.status_code == 200
    assert len((await authed_client.get("/notifications/all")).json()) == 1


@pytest.mark.asyncio
async def test_admin_creates_notification(admin_client: AsyncClient, db, test_user):
    response = await admin_client.post(
        "/notifications/create",
        json={
            "user_id": str(test_user.id),
            "type": "hours_shortfall",
            "title": "Hours",
            "message": "You are 3 hours short this week",
            "priority": "high",
        },
    )

    assert response.status_code == 200
    notification = db.query(Notification).one()
    assert notification.user_id == test_user.id
    assert notification.priority == "high"


@pytest.mark.asyncio
async def test_admin_create_for_unknown_user(admin_client: AsyncClient):
    response = await admin_client.post(
        "/notifications/create",
        json={
            "user_id": "00000000-0000-0000-0000-000000000000",
            "type": "system_alert",
            "title": "t",
            "message": "m",
        },
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"


@pytest.mark.asyncio
async def test_employee_cannot_create_notification(authed_client: AsyncClient, test_user):
    response = await authed_client.post(
        "/notifications/create",
        json={"user_id": str(test_user.id), "type": "system_alert", "title": "t", "message": "m"},
    )
    assert response.status_code == 403
