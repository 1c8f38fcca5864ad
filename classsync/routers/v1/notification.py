from fastapi import APIRouter, Query

from classsync.core.responses import ok, pagination
from classsync.routers.v1.deps import NotificationPageDep, NotificationRepoDep, UserDep
from classsync.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications")


@router.get("")
async def list_notifications_endpoint(
    user: UserDep,
    repo: NotificationRepoDep,
    page: NotificationPageDep,
    unread_only: bool = Query(False, alias="unreadOnly"),
):
    items, total, unread = await NotificationService.list_notifications(user, repo, page, unread_only)
    return ok(
        {"notifications": items, "unreadCount": unread},
        page=pagination(page.page, page.limit, total),
    )


@router.put("/read-all")
async def mark_all_read_endpoint(user: UserDep, repo: NotificationRepoDep):
    await NotificationService.mark_all_as_read(user, repo)
    return ok(message="All notifications marked as read")


@router.put("/{notification_id}/read")
async def mark_read_endpoint(notification_id: str, user: UserDep, repo: NotificationRepoDep):
    notification = await NotificationService.mark_as_read(notification_id, user, repo)
    return ok({"notification": notification}, message="Notification marked as read")


@router.delete("/{notification_id}")
async def delete_notification_endpoint(notification_id: str, user: UserDep, repo: NotificationRepoDep):
    await NotificationService.delete_notification(notification_id, user, repo)
    return ok(message="Notification deleted successfully")
