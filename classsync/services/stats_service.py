from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from classsync.database.assignment_repo import AssignmentRepo
from classsync.database.notification_repo import NotificationRepo
from classsync.database.submission_repo import SubmissionRepo
from classsync.database.user_repo import UserRepo
from classsync.schemas.assignment import AssignmentFilter
from classsync.schemas.context import UserContext
from classsync.schemas.notification import NotificationFilter
from classsync.schemas.submission import SubmissionFilter, SubmissionStatus
from classsync.schemas.user import Role, UserFilter
from classsync.services.access_policy import require_role


class StatsService:

    @staticmethod
    async def system_stats(
        admin: UserContext,
        users: UserRepo,
        assignments: AssignmentRepo,
        submissions: SubmissionRepo,
        notifications: NotificationRepo,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Contatori letti dal database a ogni richiesta; nessuna cache in memoria."""
        require_role(admin, Role.ADMIN)
        now = now or datetime.now(timezone.utc)
        week_ago = now - timedelta(days=7)
        month_ago = now - timedelta(days=30)

        return {
            "users": {
                "total": await users.count(UserFilter()),
                "students": await users.count(UserFilter(role=Role.STUDENT)),
                "teachers": await users.count(UserFilter(role=Role.TEACHER)),
                "admins": await users.count(UserFilter(role=Role.ADMIN)),
                "active": await users.count(UserFilter(isActive=True)),
                "recent": await users.count(UserFilter(createdSince=week_ago)),
                "activeLast30Days": await users.count(UserFilter(lastLoginSince=month_ago)),
            },
            "assignments": {
                "total": await assignments.count(AssignmentFilter()),
                "active": await assignments.count(AssignmentFilter(isActive=True, dueAfter=now)),
                "overdue": await assignments.count(AssignmentFilter(isActive=True, dueBefore=now)),
                "recent": await assignments.count(AssignmentFilter(createdSince=week_ago)),
            },
            "submissions": {
                "total": await submissions.count(SubmissionFilter()),
                "late": await submissions.count(SubmissionFilter(status=SubmissionStatus.LATE)),
                "recent": await submissions.count(SubmissionFilter(createdSince=week_ago)),
            },
            "notifications": {
                "total": await notifications.count(NotificationFilter()),
            },
        }
