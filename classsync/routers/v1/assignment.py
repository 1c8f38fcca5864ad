from typing import Optional

from fastapi import APIRouter, Query, status

from classsync.core.responses import ok, pagination
from classsync.routers.v1.deps import (
    AssignmentRepoDep,
    NotificationRepoDep,
    PageDep,
    UserDep,
    UserRepoDep,
)
from classsync.schemas.assignment import AssignmentCreate, AssignmentStatusFilter, AssignmentUpdate
from classsync.services.assignment_service import AssignmentService
from classsync.services.summaries import with_creator

router = APIRouter(prefix="/assignments")


@router.get("")
async def list_assignments_endpoint(
    user: UserDep,
    repo: AssignmentRepoDep,
    users: UserRepoDep,
    page: PageDep,
    status_: Optional[AssignmentStatusFilter] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
):
    items, total = await AssignmentService.list_assignments(user, repo, page, status=status_, search=search)
    return ok({"assignments": await with_creator(items, users)}, page=pagination(page.page, page.limit, total))


@router.get("/{assignment_id}")
async def get_assignment_endpoint(assignment_id: str, user: UserDep, repo: AssignmentRepoDep, users: UserRepoDep):
    assignment = await AssignmentService.get_assignment(assignment_id, user, repo)
    [row] = await with_creator([assignment], users)
    return ok({"assignment": row})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_assignment_endpoint(
    data: AssignmentCreate,
    user: UserDep,
    repo: AssignmentRepoDep,
    users: UserRepoDep,
    notifications: NotificationRepoDep,
):
    assignment = await AssignmentService.create_assignment(data, user, repo, users, notifications)
    [row] = await with_creator([assignment], users)
    return ok({"assignment": row}, message="Assignment created successfully")


@router.put("/{assignment_id}")
async def update_assignment_endpoint(
    assignment_id: str,
    data: AssignmentUpdate,
    user: UserDep,
    repo: AssignmentRepoDep,
    users: UserRepoDep,
    notifications: NotificationRepoDep,
):
    assignment = await AssignmentService.update_assignment(assignment_id, data, user, repo, users, notifications)
    [row] = await with_creator([assignment], users)
    return ok({"assignment": row}, message="Assignment updated successfully")


@router.delete("/{assignment_id}")
async def delete_assignment_endpoint(assignment_id: str, user: UserDep, repo: AssignmentRepoDep):
    await AssignmentService.delete_assignment(assignment_id, user, repo)
    return ok(message="Assignment deleted successfully")
