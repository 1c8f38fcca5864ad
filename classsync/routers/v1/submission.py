from typing import Optional

from fastapi import APIRouter, Query, status

from classsync.core.responses import ok, pagination
from classsync.routers.v1.deps import (
    AssignmentRepoDep,
    NotificationRepoDep,
    PageDep,
    SubmissionRepoDep,
    UserDep,
    UserRepoDep,
)
from classsync.schemas.assignment import AssignmentSummary
from classsync.schemas.submission import FeedbackUpdate, SubmissionCreate, SubmissionStatus, SubmissionUpdate
from classsync.services.submission_service import SubmissionService
from classsync.services.summaries import with_student

router = APIRouter(prefix="/submissions")


@router.get("")
async def list_submissions_endpoint(
    user: UserDep,
    repo: SubmissionRepoDep,
    assignments: AssignmentRepoDep,
    users: UserRepoDep,
    page: PageDep,
    status_: Optional[SubmissionStatus] = Query(None, alias="status"),
):
    items, total = await SubmissionService.list_submissions(user, repo, assignments, page, status=status_)
    return ok({"submissions": await with_student(items, users)}, page=pagination(page.page, page.limit, total))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_submission_endpoint(
    data: SubmissionCreate,
    user: UserDep,
    repo: SubmissionRepoDep,
    assignments: AssignmentRepoDep,
    users: UserRepoDep,
    notifications: NotificationRepoDep,
):
    submission = await SubmissionService.create_submission(data, user, repo, assignments, notifications)
    [row] = await with_student([submission], users)
    return ok({"submission": row}, message="Assignment submitted successfully")


# /my e /assignment/{id} vanno dichiarate prima di /{submission_id}
@router.get("/my")
async def my_submissions_endpoint(
    user: UserDep,
    repo: SubmissionRepoDep,
    assignments: AssignmentRepoDep,
    page: PageDep,
):
    items, total = await SubmissionService.list_my_submissions(user, repo, assignments, page)
    return ok({"submissions": items}, page=pagination(page.page, page.limit, total))


@router.get("/assignment/{assignment_id}")
async def submissions_by_assignment_endpoint(
    assignment_id: str,
    user: UserDep,
    repo: SubmissionRepoDep,
    assignments: AssignmentRepoDep,
    users: UserRepoDep,
    page: PageDep,
    status_: Optional[SubmissionStatus] = Query(None, alias="status"),
):
    assignment, items, total = await SubmissionService.list_for_assignment(
        assignment_id, user, repo, assignments, page, status=status_
    )
    summary = AssignmentSummary(id=assignment.id, title=assignment.title, dueDate=assignment.dueDate)
    return ok(
        {"submissions": await with_student(items, users), "assignment": summary},
        page=pagination(page.page, page.limit, total),
    )


@router.get("/{submission_id}")
async def get_submission_endpoint(
    submission_id: str,
    user: UserDep,
    repo: SubmissionRepoDep,
    assignments: AssignmentRepoDep,
    users: UserRepoDep,
):
    submission = await SubmissionService.get_submission(submission_id, user, repo, assignments)
    [row] = await with_student([submission], users)
    return ok({"submission": row})


@router.put("/{submission_id}")
async def update_submission_endpoint(
    submission_id: str,
    data: SubmissionUpdate,
    user: UserDep,
    repo: SubmissionRepoDep,
    assignments: AssignmentRepoDep,
    users: UserRepoDep,
):
    submission = await SubmissionService.update_submission(submission_id, data, user, repo, assignments)
    [row] = await with_student([submission], users)
    return ok({"submission": row}, message="Submission updated successfully")


@router.put("/{submission_id}/feedback")
async def feedback_endpoint(
    submission_id: str,
    data: FeedbackUpdate,
    user: UserDep,
    repo: SubmissionRepoDep,
    assignments: AssignmentRepoDep,
    users: UserRepoDep,
    notifications: NotificationRepoDep,
):
    submission = await SubmissionService.set_feedback(submission_id, data, user, repo, assignments, notifications)
    [row] = await with_student([submission], users)
    return ok({"submission": row}, message="Feedback saved successfully")
