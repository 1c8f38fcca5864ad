from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Query, status

from classsync.core.responses import ok, pagination
from classsync.routers.v1.deps import (
    AdminDep,
    AssignmentRepoDep,
    NotificationRepoDep,
    PageDep,
    SubmissionRepoDep,
    UserRepoDep,
)
from classsync.schemas.assignment import AssignmentStatusFilter
from classsync.schemas.submission import SubmissionStatus
from classsync.schemas.user import Role, RoleUpdate, StatusUpdate, UserCreate, UserPublic
from classsync.services.admin_service import AdminService
from classsync.services.assignment_service import AssignmentService
from classsync.services.stats_service import StatsService
from classsync.services.submission_service import SubmissionService
from classsync.services.summaries import with_creator

router = APIRouter(prefix="/admin")


# ---- utenti ----

@router.get("/users")
async def list_users_endpoint(
    admin: AdminDep,
    users: UserRepoDep,
    page: PageDep,
    role: Optional[Role] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = Query(None),
):
    items, total = await AdminService.list_users(admin, users, page, role=role, is_active=is_active, search=search)
    return ok(
        {"users": [UserPublic.from_user(u) for u in items]},
        page=pagination(page.page, page.limit, total),
    )


@router.get("/users/{user_id}")
async def get_user_endpoint(
    user_id: str,
    admin: AdminDep,
    users: UserRepoDep,
    assignments: AssignmentRepoDep,
    submissions: SubmissionRepoDep,
):
    user = await AdminService.get_user(user_id, admin, users, assignments, submissions)
    return ok({"user": user})


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user_endpoint(data: UserCreate, admin: AdminDep, users: UserRepoDep):
    user = await AdminService.create_user(data, admin, users)
    return ok({"user": UserPublic.from_user(user)}, message="User created successfully")


@router.put("/users/{user_id}/status")
async def update_status_endpoint(user_id: str, data: StatusUpdate, admin: AdminDep, users: UserRepoDep):
    user = await AdminService.update_status(user_id, data.isActive, admin, users)
    verb = "activated" if data.isActive else "deactivated"
    return ok({"user": UserPublic.from_user(user)}, message=f"User {verb} successfully")


@router.put("/users/{user_id}/role")
async def update_role_endpoint(user_id: str, data: RoleUpdate, admin: AdminDep, users: UserRepoDep):
    user = await AdminService.update_role(user_id, data.role, admin, users)
    return ok({"user": UserPublic.from_user(user)}, message="User role updated successfully")


@router.delete("/users/{user_id}")
async def delete_user_endpoint(user_id: str, admin: AdminDep, users: UserRepoDep):
    await AdminService.delete_user(user_id, admin, users)
    return ok(message="User deleted successfully")


# ---- statistiche e log ----

@router.get("/stats")
async def stats_endpoint(
    admin: AdminDep,
    users: UserRepoDep,
    assignments: AssignmentRepoDep,
    submissions: SubmissionRepoDep,
    notifications: NotificationRepoDep,
):
    data = await StatsService.system_stats(admin, users, assignments, submissions, notifications)
    return ok(data)


@router.get("/logs")
async def logs_endpoint(admin: AdminDep, users: UserRepoDep):
    logs = await AdminService.activity_logs(admin, users)
    return ok({"logs": logs})


# ---- contenuti ----

@router.get("/assignments")
async def all_assignments_endpoint(
    admin: AdminDep,
    repo: AssignmentRepoDep,
    users: UserRepoDep,
    page: PageDep,
    status_: Optional[AssignmentStatusFilter] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
):
    items, total = await AssignmentService.list_all(admin, repo, page, status=status_, search=search)
    return ok({"assignments": await with_creator(items, users)}, page=pagination(page.page, page.limit, total))


@router.get("/submissions")
async def all_submissions_endpoint(
    admin: AdminDep,
    repo: SubmissionRepoDep,
    assignments: AssignmentRepoDep,
    users: UserRepoDep,
    page: PageDep,
    status_: Optional[str] = Query(None, alias="status"),
):
    # 'all' o valori sconosciuti: nessun filtro
    wanted = SubmissionStatus(status_) if status_ in ("submitted", "late") else None
    items, total = await SubmissionService.list_all(admin, repo, assignments, users, page, status=wanted)
    return ok({"submissions": items}, page=pagination(page.page, page.limit, total))


@router.get("/health")
async def admin_health_endpoint(admin: AdminDep):
    return ok(
        {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "user": {"id": admin.user_id, "email": admin.email, "role": admin.role},
        },
        message="Admin panel is healthy",
    )
