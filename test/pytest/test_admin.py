import pytest
from datetime import datetime, timedelta, timezone

from classsync.core import errors
from classsync.schemas.common import Page
from classsync.schemas.submission import Submission, SubmissionStatus
from classsync.schemas.user import Role, UserCreate
from classsync.services.admin_service import AdminService
from classsync.services.stats_service import StatsService

from conftest import make_assignment

PAGE = Page(page=1, limit=10)


# --------------------------------- Tests --------------------------------------
@pytest.mark.asyncio
async def test_list_users_filters(users, admin):
    items, total = await AdminService.list_users(admin, users, PAGE, role=Role.STUDENT)
    assert {u.id for u in items} == {"s1", "s2"} and total == 2

    items, _ = await AdminService.list_users(admin, users, PAGE, search="T1@SCHOOL")
    assert [u.id for u in items] == ["t1"]


@pytest.mark.asyncio
async def test_admin_endpoints_require_admin(users, teacher):
    with pytest.raises(errors.Forbidden):
        await AdminService.list_users(teacher, users, PAGE)
    with pytest.raises(errors.Forbidden):
        await AdminService.update_role("s1", Role.TEACHER, teacher, users)


@pytest.mark.asyncio
async def test_get_user_with_counters(users, assignments, submissions, admin):
    assignments.add(make_assignment("a", "t1"))
    assignments.add(make_assignment("b", "t1", isActive=False))

    detail = await AdminService.get_user("t1", admin, users, assignments, submissions)
    assert detail["assignmentsCount"] == 2
    assert detail["submissionsCount"] == 0
    assert "passwordHash" not in detail

    with pytest.raises(errors.NotFound):
        await AdminService.get_user("missing", admin, users, assignments, submissions)


@pytest.mark.asyncio
async def test_create_user_any_role(users, admin):
    data = UserCreate(name="Nuovo Admin", email="Boss@School.edu", password="secret1", role=Role.ADMIN)
    created = await AdminService.create_user(data, admin, users)
    assert created.role is Role.ADMIN
    assert created.email == "boss@school.edu"
    assert created.passwordHash != "secret1"

    with pytest.raises(errors.Conflict):
        await AdminService.create_user(data, admin, users)


@pytest.mark.asyncio
async def test_update_role_and_status(users, admin):
    promoted = await AdminService.update_role("s1", Role.TEACHER, admin, users)
    assert promoted.role is Role.TEACHER

    disabled = await AdminService.update_status("s2", False, admin, users)
    assert disabled.isActive is False

    with pytest.raises(errors.NotFound):
        await AdminService.update_status("missing", False, admin, users)


@pytest.mark.asyncio
async def test_admin_cannot_demote_self(users, admin):
    with pytest.raises(errors.ValidationError):
        await AdminService.update_role("a1", Role.STUDENT, admin, users)
    assert users.items["a1"].role is Role.ADMIN


@pytest.mark.asyncio
async def test_admin_cannot_deactivate_or_delete_self(users, admin):
    with pytest.raises(errors.ValidationError):
        await AdminService.update_status("a1", False, admin, users)
    with pytest.raises(errors.ValidationError):
        await AdminService.delete_user("a1", admin, users)
    assert "a1" in users.items


@pytest.mark.asyncio
async def test_delete_user(users, admin):
    await AdminService.delete_user("s2", admin, users)
    assert "s2" not in users.items
    with pytest.raises(errors.NotFound):
        await AdminService.delete_user("s2", admin, users)


@pytest.mark.asyncio
async def test_activity_logs_most_recent_first(users, admin):
    now = datetime.now(timezone.utc)
    await users.update("s1", {"lastLogin": now})
    await users.update("t1", {"lastLogin": now - timedelta(hours=1)})

    logs = await AdminService.activity_logs(admin, users, limit=2)
    assert [entry["user"]["email"] for entry in logs] == ["s1@school.edu", "t1@school.edu"]
    assert logs[0]["type"] == "user_activity"


@pytest.mark.asyncio
async def test_system_stats(users, assignments, submissions, notifications, admin, teacher):
    now = datetime.now(timezone.utc)
    assignments.add(make_assignment("open", "t1", dueDate=now + timedelta(days=1)))
    assignments.add(make_assignment("past", "t1", dueDate=now - timedelta(days=1)))
    submissions.add(Submission(
        id="sb", assignmentId="past", studentId="s1", status=SubmissionStatus.LATE,
        submittedAt=now, createdAt=now,
    ))

    stats = await StatsService.system_stats(admin, users, assignments, submissions, notifications, now=now)
    assert stats["users"]["total"] == 5
    assert stats["users"]["students"] == 2
    assert stats["users"]["teachers"] == 2
    assert stats["users"]["admins"] == 1
    assert stats["assignments"]["total"] == 2
    assert stats["assignments"]["active"] == 1
    assert stats["assignments"]["overdue"] == 1
    assert stats["submissions"]["late"] == 1
    assert stats["notifications"]["total"] == 0

    with pytest.raises(errors.Forbidden):
        await StatsService.system_stats(teacher, users, assignments, submissions, notifications)
