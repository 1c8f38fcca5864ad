from typing import Annotated

from fastapi import Depends

from classsync.core.deps import (
    get_assignment_repo,
    get_notification_page,
    get_notification_repo,
    get_page,
    get_submission_repo,
    get_user_repo,
)
from classsync.database.assignment_repo import AssignmentRepo
from classsync.database.notification_repo import NotificationRepo
from classsync.database.submission_repo import SubmissionRepo
from classsync.database.user_repo import UserRepo
from classsync.schemas.common import Page
from classsync.schemas.context import UserContext
from classsync.schemas.user import Role
from classsync.services.auth_service import AuthService

UserRepoDep = Annotated[UserRepo, Depends(get_user_repo)]
AssignmentRepoDep = Annotated[AssignmentRepo, Depends(get_assignment_repo)]
SubmissionRepoDep = Annotated[SubmissionRepo, Depends(get_submission_repo)]
NotificationRepoDep = Annotated[NotificationRepo, Depends(get_notification_repo)]

UserDep = Annotated[UserContext, Depends(AuthService.get_current_user)]
AdminDep = Annotated[UserContext, Depends(AuthService.require_roles(Role.ADMIN))]

PageDep = Annotated[Page, Depends(get_page)]
NotificationPageDep = Annotated[Page, Depends(get_notification_page)]
