from typing import Any

from fastapi import Query, Request

from classsync.core import errors
from classsync.core.config import settings
from classsync.database.assignment_repo import AssignmentRepo
from classsync.database.notification_repo import NotificationRepo
from classsync.database.submission_repo import SubmissionRepo
from classsync.database.user_repo import UserRepo
from classsync.schemas.common import Page


def _from_state(request: Request, name: str) -> Any:
    repo = getattr(request.app.state, name, None)
    if repo is None:
        raise RuntimeError(f"Repository non inizializzato: {name}")
    return repo


def get_user_repo(request: Request) -> UserRepo:
    return _from_state(request, "user_repo")


def get_assignment_repo(request: Request) -> AssignmentRepo:
    return _from_state(request, "assignment_repo")


def get_submission_repo(request: Request) -> SubmissionRepo:
    return _from_state(request, "submission_repo")


def get_notification_repo(request: Request) -> NotificationRepo:
    return _from_state(request, "notification_repo")


def _page(page: int, limit: int) -> Page:
    if page < 1:
        raise errors.ValidationError("page must be >= 1")
    if limit < 1 or limit > settings.max_page_size:
        raise errors.ValidationError(f"limit must be between 1 and {settings.max_page_size}")
    return Page(page=page, limit=limit)


def get_page(
    page: int = Query(1),
    limit: int = Query(settings.default_page_size),
) -> Page:
    return _page(page, limit)


def get_notification_page(
    page: int = Query(1),
    limit: int = Query(20),
) -> Page:
    return _page(page, limit)
