import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Sequence, Tuple

from classsync.core import errors
from classsync.database.assignment_repo import AssignmentRepo
from classsync.database.notification_repo import NotificationRepo
from classsync.database.user_repo import UserRepo
from classsync.schemas.assignment import (
    Assignment,
    AssignmentCreate,
    AssignmentFilter,
    AssignmentStatusFilter,
    AssignmentUpdate,
)
from classsync.schemas.common import Page
from classsync.schemas.context import UserContext
from classsync.schemas.notification import NotificationType
from classsync.schemas.user import Role
from classsync.services.access_policy import Action, Resource, enforce, require_role
from classsync.services.notification_service import NotificationService

logger = logging.getLogger("classsync.assignments")


def create_assignment_id() -> str:
    return f"as-{uuid.uuid4().hex[:12]}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def apply_status_filter(filt: AssignmentFilter, status: Optional[AssignmentStatusFilter], now: datetime) -> AssignmentFilter:
    if status is AssignmentStatusFilter.ACTIVE:
        return filt.model_copy(update={"isActive": True, "dueAfter": now})
    if status is AssignmentStatusFilter.OVERDUE:
        return filt.model_copy(update={"isActive": True, "dueBefore": now})
    if status is AssignmentStatusFilter.INACTIVE:
        return filt.model_copy(update={"isActive": False})
    return filt


class AssignmentService:

    @staticmethod
    async def create_assignment(
        data: AssignmentCreate,
        user: UserContext,
        repo: AssignmentRepo,
        users: UserRepo,
        notifications: NotificationRepo,
        now: Optional[datetime] = None,
    ) -> Assignment:
        enforce(user, Action.CREATE, Resource.ASSIGNMENT, message="Access denied. Teacher role required.")
        now = now or _now()
        if data.dueDate <= now:
            raise errors.ValidationError("Due date must be in the future")

        assignment = Assignment(
            id=create_assignment_id(),
            createdBy=user.user_id,
            createdAt=now,
            updatedAt=now,
            isActive=True,
            **data.model_dump(),
        )
        inserted_id = await repo.create(assignment)
        if not inserted_id:
            raise errors.ServerError("Creazione assignment fallita")

        try:
            await NotificationService.notify_students(
                notifications, users,
                title="New assignment",
                message=f"A new assignment has been published: {assignment.title}",
                type_=NotificationType.ASSIGNMENT,
                related_id=assignment.id,
            )
        except Exception:
            logger.exception("Notifica nuovo assignment %s fallita", assignment.id)
        return assignment

    @staticmethod
    async def list_assignments(
        user: UserContext,
        repo: AssignmentRepo,
        page: Page,
        status: Optional[AssignmentStatusFilter] = None,
        search: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[Sequence[Assignment], int]:
        enforce(user, Action.LIST, Resource.ASSIGNMENT)
        filt = AssignmentFilter(isActive=True, search=search or None)
        if user.role is Role.TEACHER:
            filt = filt.model_copy(update={"createdBy": user.user_id})
        # per chi non è admin "inactive"/"all" non allargano mai la vista
        if status in (AssignmentStatusFilter.ACTIVE, AssignmentStatusFilter.OVERDUE):
            filt = apply_status_filter(filt, status, now or _now())
        items = await repo.find(filt, skip=page.skip, limit=page.limit)
        total = await repo.count(filt)
        return items, total

    @staticmethod
    async def list_all(
        user: UserContext,
        repo: AssignmentRepo,
        page: Page,
        status: Optional[AssignmentStatusFilter] = None,
        search: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[Sequence[Assignment], int]:
        """Vista admin: tutti gli assignment, anche quelli disattivati."""
        require_role(user, Role.ADMIN)
        filt = apply_status_filter(AssignmentFilter(search=search or None), status, now or _now())
        items = await repo.find(filt, skip=page.skip, limit=page.limit)
        total = await repo.count(filt)
        return items, total

    @staticmethod
    async def get_assignment(assignment_id: str, user: UserContext, repo: AssignmentRepo) -> Assignment:
        doc = await repo.find_one(assignment_id)
        if not doc:
            raise errors.NotFound("Assignment not found")
        enforce(user, Action.READ, Resource.ASSIGNMENT, owner_id=doc.createdBy)
        if not doc.isActive and user.role is not Role.ADMIN and doc.createdBy != user.user_id:
            raise errors.NotFound("Assignment not found")
        return doc

    @staticmethod
    async def update_assignment(
        assignment_id: str,
        data: AssignmentUpdate,
        user: UserContext,
        repo: AssignmentRepo,
        users: UserRepo,
        notifications: NotificationRepo,
        now: Optional[datetime] = None,
    ) -> Assignment:
        doc = await repo.find_one(assignment_id)
        if not doc or not doc.isActive:
            raise errors.NotFound("Assignment not found")
        enforce(
            user, Action.UPDATE, Resource.ASSIGNMENT, owner_id=doc.createdBy,
            message="Access denied. You can only update your own assignments.",
        )
        now = now or _now()
        if data.dueDate is not None and data.dueDate <= now:
            raise errors.ValidationError("Due date must be in the future")

        fields = data.model_dump(exclude_none=True)
        if not fields:
            return doc
        fields["updatedAt"] = now
        updated = await repo.update(assignment_id, fields)
        if updated is None:
            raise errors.NotFound("Assignment not found")

        # le consegne già registrate mantengono il loro stato: qui si avvisano solo gli studenti
        if data.dueDate is not None and data.dueDate != doc.dueDate:
            try:
                await NotificationService.notify_students(
                    notifications, users,
                    title="Due date changed",
                    message=f"The due date of '{updated.title}' is now {updated.dueDate.isoformat()}",
                    type_=NotificationType.DEADLINE,
                    related_id=updated.id,
                )
            except Exception:
                logger.exception("Notifica scadenza %s fallita", updated.id)
        return updated

    @staticmethod
    async def delete_assignment(assignment_id: str, user: UserContext, repo: AssignmentRepo) -> None:
        """Soft delete: l'assignment resta nel database con isActive=False."""
        doc = await repo.find_one(assignment_id)
        if not doc or not doc.isActive:
            raise errors.NotFound("Assignment not found")
        enforce(
            user, Action.DELETE, Resource.ASSIGNMENT, owner_id=doc.createdBy,
            message="Access denied. You can only delete your own assignments.",
        )
        await repo.update(assignment_id, {"isActive": False, "updatedAt": _now()})
