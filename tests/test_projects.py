"""Tests for projects, assignments and tasks."""

import pytest
from httpx import AsyncClient

from app.db.models import Notification, ProjectAssignment, ProjectTask, TimeEntry
from app.db.types import utcnow


async def _custom_project(client: AsyncClient, name: str = "Side quest") -> str:
    response = await client.post(
        "/projects/create-custom-project",
        json={"name": name, "description": "Self-directed", "priority": "low"},
    )
    assert response.status_code == 200
    assert response.json()["success"] is True
    return response.json()["project_id"]


@pytest.mark.asyncio
async def test_custom_project_auto_assigns_creator(authed_client: AsyncClient, db, test_user):
    project_id = await _custom_project(authed_client)

    mine = (await authed_client.get("/projects/mine")).json()
    assert len(mine) == 1
    assert mine[0]["id"] == project_id
    assert mine[0]["source"] == "employee"
    assert mine[0]["role"] == "member"
    assert mine[0]["status"] == "active"
    assert db.query(ProjectAssignment).filter(ProjectAssignment.user_id == test_user.id).count() == 1


@pytest.mark.asyncio
async def test_admin_assigns_project_and_notifies(
    admin_client: AsyncClient, other_client: AsyncClient, db, test_user, other_user
):
    response = await admin_client.post(
        "/admin/assign-project",
        json={
            "name": "Payroll revamp",
            "priority": "high",
            "employee_ids": [str(test_user.id), str(other_user.id), str(test_user.id)],
        },
    )
    assert response.status_code == 200
    project_id = response.json()["project_id"]

    assert db.query(ProjectAssignment).count() == 2
    notified = {n.user_id for n in db.query(Notification).filter(Notification.type == "project_assigned")}
    assert notified == {test_user.id, other_user.id}

    mine = (await other_client.get("/projects/mine")).json()
    assert mine[0]["id"] == project_id
    assert mine[0]["source"] == "team_lead"

    overview = (await admin_client.get("/admin/projects-overview")).json()
    assert sorted(overview[0]["assignees"]) == ["Alice Employee", "Bob Employee"]
    assert overview[0]["tasks"] == 0
    assert overview[0]["progress"] == 0


@pytest.mark.asyncio
async def test_assign_project_unknown_employee(admin_client: AsyncClient):
    response = await admin_client.post(
        "/admin/assign-project",
        json={"name": "Ghost", "employee_ids": ["00000000-0000-0000-0000-000000000000"]},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_tasks_and_stats(authed_client: AsyncClient, admin_client: AsyncClient, db, test_user):
    project_id = await _custom_project(authed_client)

    response = await authed_client.post(
        "/projects/create-task",
        json={"project_id": project_id, "title": "Write docs"},
    )
    assert response.status_code == 200
    task = response.json()["task"]
    assert task["status"] == "todo"
    assert task["completed_at"] is None

    await authed_client.post(
        "/projects/create-task",
        json={"project_id": project_id, "title": "Ship it", "status": "completed"},
    )

    tasks = (await authed_client.get("/projects/tasks", params={"project_id": project_id})).json()
    assert len(tasks) == 2

    stats = (await authed_client.get("/projects/stats")).json()
    assert stats == {"total_assigned": 1, "active_projects": 1, "completed_tasks": 1}

    overview = (await admin_client.get("/admin/projects-overview")).json()
    assert overview[0]["tasks"] == 2
    assert overview[0]["progress"] == 50

    ongoing = (await admin_client.get("/admin/ongoing-tasks")).json()
    assert [t["title"] for t in ongoing] == ["Write docs"]
    assert ongoing[0]["assignee"]["id"] == str(test_user.id)
    assert ongoing[0]["project"]["id"] == project_id


@pytest.mark.asyncio
async def test_update_task_stamps_completion(authed_client: AsyncClient, db):
    project_id = await _custom_project(authed_client)
    task_id = (await authed_client.post(
        "/projects/create-task",
        json={"project_id": project_id, "title": "Fix bug"},
    )).json()["task"]["id"]

    response = await authed_client.post(
        "/projects/update-task",
        json={"task_id": task_id, "status": "completed", "title": "Fix login bug"},
    )
    assert response.status_code == 200

    task = db.query(ProjectTask).one()
    db.refresh(task)
    assert task.status == "completed"
    assert task.title == "Fix login bug"
    assert task.completed_at is not None


@pytest.mark.asyncio
async def test_only_owner_or_admin_updates_task(
    authed_client: AsyncClient, other_client: AsyncClient, admin_client: AsyncClient
):
    project_id = await _custom_project(authed_client)
    task_id = (await authed_client.post(
        "/projects/create-task",
        json={"project_id": project_id, "title": "Mine"},
    )).json()["task"]["id"]

    response = await other_client.post(
        "/projects/update-task",
        json={"task_id": task_id, "status": "blocked"},
    )
    assert response.status_code == 403

    response = await admin_client.post(
        "/projects/update-task",
        json={"task_id": task_id, "status": "blocked"},
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_task_for_missing_project(authed_client: AsyncClient):
    response = await authed_client.post(
        "/projects/create-task",
        json={"project_id": "00000000-0000-0000-0000-000000000000", "title": "Nope"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_task_linked_to_time_entry(authed_client: AsyncClient, db, test_user, other_user):
    project_id = await _custom_project(authed_client)
    own = TimeEntry(user_id=test_user.id, time_in=utcnow(), status="active")
    foreign = TimeEntry(user_id=other_user.id, time_in=utcnow(), status="active")
    db.add_all([own, foreign])
    db.commit()

    response = await authed_client.post(
        "/projects/create-task",
        json={"project_id": project_id, "title": "Linked", "time_entry_id": str(own.id)},
    )
    assert response.status_code == 200
    assert response.json()["task"]["time_entry_id"] == str(own.id)

    response = await authed_client.post(
        "/projects/create-task",
        json={"project_id": project_id, "title": "Stolen", "time_entry_id": str(foreign.id)},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Time entry not found"


@pytest.mark.asyncio
async def test_completed_tasks_today(authed_client: AsyncClient):
    project_id = await _custom_project(authed_client)
    await authed_client.post(
        "/projects/create-task",
        json={"project_id": project_id, "title": "Done today", "status": "completed"},
    )
    await authed_client.post(
        "/projects/create-task",
        json={"project_id": project_id, "title": "Still open"},
    )

    response = await authed_client.get("/time-tracking/completed-tasks-today")

    assert response.status_code == 200
    tasks = response.json()
    assert [t["title"] for t in tasks] == ["Done today"]
    assert tasks[0]["project"]["name"] == "Side quest"
