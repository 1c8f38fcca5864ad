import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence, Tuple

from classsync.core import errors
from classsync.database.notification_repo import NotificationRepo
from classsync.database.user_repo import UserRepo
from classsync.schemas.common import Page
from classsync.schemas.context import UserContext
from classsync.schemas.notification import Notification, NotificationFilter, NotificationType, RelatedType
from classsync.schemas.user import Role, UserFilter


def create_notification_id() -> str:
    return f"nt-{uuid.uuid4().hex[:12]}"


def _build(
    user_id: str,
    title: str,
    message: str,
    type_: NotificationType,
    related_id: Optional[str],
    related_type: Optional[RelatedType],
    now: datetime,
) -> Notification:
    return Notification(
        id=create_notification_id(),
        userId=user_id,
        title=title,
        message=message,
        type=type_,
        read=False,
        relatedId=related_id,
        relatedType=related_type,
        createdAt=now,
    )


class NotificationService:

    @staticmethod
    async def notify(
        repo: NotificationRepo,
        user_ids: Iterable[str],
        title: str,
        message: str,
        type_: NotificationType = NotificationType.SYSTEM,
        related_id: Optional[str] = None,
        related_type: Optional[RelatedType] = None,
    ) -> int:
        now = datetime.now(timezone.utc)
        items = [_build(uid, title, message, type_, related_id, related_type, now) for uid in user_ids]
        return await repo.create_many(items)

    @staticmethod
    async def notify_students(
        repo: NotificationRepo,
        users: UserRepo,
        title: str,
        message: str,
        type_: NotificationType,
        related_id: Optional[str] = None,
    ) -> int:
        """Notifica tutti gli studenti attivi (nuovo assignment, scadenza cambiata)."""
        students = await users.find(UserFilter(role=Role.STUDENT, isActive=True))
        return await NotificationService.notify(
            repo, [s.id for s in students], title, message, type_, related_id, RelatedType.ASSIGNMENT
        )

    @staticmethod
    async def list_notifications(
        user: UserContext,
        repo: NotificationRepo,
        page: Page,
        unread_only: bool = False,
    ) -> Tuple[Sequence[Notification], int, int]:
        """Ritorna (notifiche della pagina, totale filtrato, totale non lette)."""
        filt = NotificationFilter(userId=user.user_id, unreadOnly=unread_only)
        items = await repo.find(filt, skip=page.skip, limit=page.limit)
        total = await repo.count(filt)
        unread = await repo.count(NotificationFilter(userId=user.user_id, unreadOnly=True))
        return items, total, unread

    @staticmethod
    async def mark_as_read(notification_id: str, user: UserContext, repo: NotificationRepo) -> Notification:
        # le notifiche di altri utenti risultano semplicemente inesistenti
        n = await repo.mark_read(notification_id, user.user_id)
        if n is None:
            raise errors.NotFound("Notification not found")
        return n

    @staticmethod
    async def mark_all_as_read(user: UserContext, repo: NotificationRepo) -> int:
        return await repo.mark_all_read(user.user_id)

    @staticmethod
    async def delete_notification(notification_id: str, user: UserContext, repo: NotificationRepo) -> None:
        if not await repo.delete(notification_id, user.user_id):
            raise errors.NotFound("Notification not found")
