import logging
import pytest
from datetime import datetime, timedelta, timezone

from classsync.core.config import DEFAULT_JWT_SECRET, settings
from classsync.main import create_app

from conftest import PASSWORD, client_for, make_assignment

API = "/api/v1"


def _future(days: int = 7) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


# --------------------------------- Tests --------------------------------------
@pytest.mark.asyncio
async def test_health(app):
    async with client_for(app) as client:
        res = await client.get(f"{API}/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_missing_token_is_401(app):
    async with client_for(app) as client:
        res = await client.get(f"{API}/assignments")
    assert res.status_code == 401
    assert res.json() == {"success": False, "message": "Access denied. No token provided."}


@pytest.mark.asyncio
async def test_invalid_token_is_401(app):
    async with client_for(app) as client:
        res = await client.get(f"{API}/assignments", headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 401
    assert res.json()["success"] is False


@pytest.mark.asyncio
async def test_login_and_me(app):
    async with client_for(app) as client:
        res = await client.post(f"{API}/auth/login", json={"email": "s1@school.edu", "password": PASSWORD})
        assert res.status_code == 200
        token = res.json()["data"]["token"]
        assert "passwordHash" not in res.json()["data"]["user"]

        me = await client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["user"]["role"] == "student"


@pytest.mark.asyncio
async def test_register_validation_is_400(app):
    async with client_for(app) as client:
        res = await client.post(f"{API}/auth/register", json={"name": "X", "email": "bad", "password": "1"})
    body = res.json()
    assert res.status_code == 400
    assert body["success"] is False
    assert {e["field"].split(".")[-1] for e in body["errors"]} >= {"name", "email", "password"}


@pytest.mark.asyncio
async def test_student_cannot_create_assignment(app, auth_headers, assignments):
    payload = {"title": "T", "description": "D", "dueDate": _future()}
    async with client_for(app) as client:
        res = await client.post(f"{API}/assignments", json=payload, headers=auth_headers("s1"))
    assert res.status_code == 403
    assert assignments.items == {}


@pytest.mark.asyncio
async def test_teacher_creates_and_student_lists(app, auth_headers, notifications):
    payload = {"title": "Algebra", "description": "Esercizi", "dueDate": _future()}
    async with client_for(app) as client:
        created = await client.post(f"{API}/assignments", json=payload, headers=auth_headers("t1"))
        listed = await client.get(f"{API}/assignments?page=1&limit=5", headers=auth_headers("s1"))

    assert created.status_code == 201
    body = created.json()
    assert body["success"] is True
    assert body["data"]["assignment"]["createdBy"] == "t1"
    assert body["data"]["assignment"]["creator"]["name"] == "User t1"

    page = listed.json()
    assert [a["title"] for a in page["data"]["assignments"]] == ["Algebra"]
    assert page["data"]["assignments"][0]["creator"]["email"] == "t1@school.edu"
    assert page["pagination"] == {"current": 1, "pages": 1, "total": 1, "limit": 5}
    assert len(notifications.for_user("s1")) == 1


@pytest.mark.asyncio
async def test_bad_pagination_is_400(app, auth_headers):
    async with client_for(app) as client:
        res = await client.get(f"{API}/assignments?limit=0", headers=auth_headers("s1"))
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_submit_then_duplicate_is_409(app, auth_headers, assignments):
    assignments.add(make_assignment("a1", "t1"))
    payload = {"assignmentId": "a1", "text": "risposta"}
    async with client_for(app) as client:
        first = await client.post(f"{API}/submissions", json=payload, headers=auth_headers("s1"))
        second = await client.post(f"{API}/submissions", json=payload, headers=auth_headers("s1"))
        mine = await client.get(f"{API}/submissions/my", headers=auth_headers("s1"))

    assert first.status_code == 201
    assert first.json()["data"]["submission"]["status"] == "submitted"
    assert second.status_code == 409
    assert second.json()["message"] == "You have already submitted this assignment"
    assert mine.json()["data"]["submissions"][0]["assignment"]["id"] == "a1"


@pytest.mark.asyncio
async def test_overdue_submission_is_400(app, auth_headers, assignments):
    past = datetime.now(timezone.utc) - timedelta(days=1)
    assignments.add(make_assignment("old", "t1", dueDate=past))
    async with client_for(app) as client:
        res = await client.post(
            f"{API}/submissions", json={"assignmentId": "old", "text": "x"}, headers=auth_headers("s1")
        )
    assert res.status_code == 400
    assert res.json()["message"] == "Assignment is overdue and cannot be submitted"


@pytest.mark.asyncio
async def test_notifications_flow(app, auth_headers, assignments):
    assignments.add(make_assignment("a1", "t1"))
    async with client_for(app) as client:
        await client.post(f"{API}/submissions", json={"assignmentId": "a1", "text": "x"}, headers=auth_headers("s1"))
        listed = await client.get(f"{API}/notifications", headers=auth_headers("t1"))
        assert listed.json()["data"]["unreadCount"] == 1
        nid = listed.json()["data"]["notifications"][0]["id"]

        other = await client.put(f"{API}/notifications/{nid}/read", headers=auth_headers("t2"))
        assert other.status_code == 404

        await client.put(f"{API}/notifications/read-all", headers=auth_headers("t1"))
        after = await client.get(f"{API}/notifications?unreadOnly=true", headers=auth_headers("t1"))
    assert after.json()["data"]["unreadCount"] == 0
    assert after.json()["pagination"]["total"] == 0


@pytest.mark.asyncio
async def test_admin_routes_require_admin(app, auth_headers):
    async with client_for(app) as client:
        denied = await client.get(f"{API}/admin/stats", headers=auth_headers("t1"))
        stats = await client.get(f"{API}/admin/stats", headers=auth_headers("a1"))
    assert denied.status_code == 403
    assert denied.json()["message"] == "Access denied. Admin role required."
    assert stats.status_code == 200
    assert stats.json()["data"]["users"]["total"] == 5


@pytest.mark.asyncio
async def test_admin_self_demotion_is_400(app, auth_headers, users):
    async with client_for(app) as client:
        res = await client.put(f"{API}/admin/users/a1/role", json={"role": "student"}, headers=auth_headers("a1"))
    assert res.status_code == 400
    assert users.items["a1"].role.value == "admin"


@pytest.mark.asyncio
async def test_admin_submissions_unknown_status_means_all(app, auth_headers, assignments):
    assignments.add(make_assignment("a1", "t1"))
    async with client_for(app) as client:
        await client.post(f"{API}/submissions", json={"assignmentId": "a1", "text": "x"}, headers=auth_headers("s1"))
        res = await client.get(f"{API}/admin/submissions?status=whatever", headers=auth_headers("a1"))
        late = await client.get(f"{API}/admin/submissions?status=late", headers=auth_headers("a1"))
    assert res.json()["pagination"]["total"] == 1
    assert res.json()["data"]["submissions"][0]["student"]["id"] == "s1"
    assert late.json()["pagination"]["total"] == 0


@pytest.mark.asyncio
async def test_unknown_route_is_404(app):
    async with client_for(app) as client:
        res = await client.get(f"{API}/nope")
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": f"Route {API}/nope not found"}


@pytest.mark.asyncio
async def test_unexpected_error_is_generic_500(app):
    async def boom():
        raise RuntimeError("dettaglio interno")

    app.add_api_route("/boom", boom)
    async with client_for(app, raise_app_exceptions=False) as client:
        res = await client.get("/boom")
    assert res.status_code == 500
    assert res.json() == {"success": False, "message": "Server error"}


@pytest.mark.asyncio
async def test_teacher_sees_who_submitted(app, auth_headers, assignments):
    assignments.add(make_assignment("a1", "t1"))
    async with client_for(app) as client:
        await client.post(f"{API}/submissions", json={"assignmentId": "a1", "text": "x"}, headers=auth_headers("s1"))
        listed = await client.get(f"{API}/submissions/assignment/a1", headers=auth_headers("t1"))
        sid = listed.json()["data"]["submissions"][0]["id"]
        single = await client.get(f"{API}/submissions/{sid}", headers=auth_headers("t1"))

    row = listed.json()["data"]["submissions"][0]
    assert row["student"] == {"id": "s1", "name": "User s1", "email": "s1@school.edu", "role": "student"}
    assert single.json()["data"]["submission"]["student"]["name"] == "User s1"


def test_default_jwt_secret_logs_warning(monkeypatch, caplog):
    monkeypatch.setattr(settings, "jwt_secret", DEFAULT_JWT_SECRET)
    with caplog.at_level(logging.WARNING, logger="classsync"):
        create_app()
    assert "JWT_SECRET" in caplog.text

    caplog.clear()
    monkeypatch.setattr(settings, "jwt_secret", "un-segreto-vero")
    with caplog.at_level(logging.WARNING, logger="classsync"):
        create_app()
    assert "JWT_SECRET" not in caplog.text
