import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from classsync.core import errors
from classsync.database.assignment_repo import AssignmentRepo
from classsync.database.submission_repo import SubmissionRepo
from classsync.database.user_repo import UserRepo
from classsync.schemas.assignment import AssignmentFilter
from classsync.schemas.common import Page
from classsync.schemas.context import UserContext
from classsync.schemas.submission import SubmissionFilter
from classsync.schemas.user import Role, User, UserCreate, UserFilter, UserPublic
from classsync.services import access_policy
from classsync.services.auth_service import new_user

logger = logging.getLogger("classsync.admin")


class AdminService:

    @staticmethod
    async def list_users(
        admin: UserContext,
        users: UserRepo,
        page: Page,
        role: Optional[Role] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> Tuple[Sequence[User], int]:
        access_policy.require_role(admin, Role.ADMIN)
        filt = UserFilter(role=role, isActive=is_active, search=search or None)
        items = await users.find(filt, skip=page.skip, limit=page.limit)
        total = await users.count(filt)
        return items, total

    @staticmethod
    async def get_user(
        user_id: str,
        admin: UserContext,
        users: UserRepo,
        assignments: AssignmentRepo,
        submissions: SubmissionRepo,
    ) -> Dict[str, Any]:
        access_policy.require_role(admin, Role.ADMIN)
        user = await users.find_one(user_id)
        if user is None:
            raise errors.NotFound("User not found")
        out = UserPublic.from_user(user).model_dump()
        out["assignmentsCount"] = await assignments.count(AssignmentFilter(createdBy=user.id))
        out["submissionsCount"] = await submissions.count(SubmissionFilter(studentId=user.id))
        return out

    @staticmethod
    async def create_user(data: UserCreate, admin: UserContext, users: UserRepo) -> User:
        access_policy.require_role(admin, Role.ADMIN)
        if await users.find_by_email(data.email):
            raise errors.Conflict("User already exists with this email")
        user = new_user(data.name, data.email, data.password, data.role)
        await users.create(user)
        logger.info("admin %s created user %s (%s)", admin.user_id, user.id, user.role.value)
        return user

    @staticmethod
    async def update_status(user_id: str, is_active: bool, admin: UserContext, users: UserRepo) -> User:
        access_policy.require_role(admin, Role.ADMIN)
        access_policy.check_status_change(admin, user_id, is_active)
        user = await users.update(user_id, {"isActive": is_active})
        if user is None:
            raise errors.NotFound("User not found")
        logger.info("admin %s set isActive=%s on %s", admin.user_id, is_active, user_id)
        return user

    @staticmethod
    async def update_role(user_id: str, role: Role, admin: UserContext, users: UserRepo) -> User:
        access_policy.require_role(admin, Role.ADMIN)
        access_policy.check_role_change(admin, user_id, role)
        user = await users.update(user_id, {"role": role})
        if user is None:
            raise errors.NotFound("User not found")
        logger.info("admin %s set role=%s on %s", admin.user_id, role.value, user_id)
        return user

    @staticmethod
    async def delete_user(user_id: str, admin: UserContext, users: UserRepo) -> None:
        """Cancellazione definitiva: assignment e consegne dell'utente restano per le statistiche."""
        access_policy.require_role(admin, Role.ADMIN)
        access_policy.check_user_delete(admin, user_id)
        if not await users.delete(user_id):
            raise errors.NotFound("User not found")
        logger.info("admin %s deleted user %s", admin.user_id, user_id)

    @staticmethod
    async def activity_logs(admin: UserContext, users: UserRepo, limit: int = 20) -> List[Dict[str, Any]]:
        access_policy.require_role(admin, Role.ADMIN)
        logs = []
        for u in await users.recent_activity(limit):
            seen = u.lastLogin.isoformat() if u.lastLogin else "Never"
            logs.append({
                "type": "user_activity",
                "message": f"{u.name} ({u.role.value}) last active: {seen}",
                "timestamp": u.lastLogin or u.createdAt,
                "user": {"name": u.name, "email": u.email, "role": u.role},
            })
        return logs
