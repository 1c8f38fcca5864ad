import pytest

from classsync.core import errors
from classsync.schemas.common import Page
from classsync.schemas.notification import NotificationType
from classsync.services.notification_service import NotificationService

PAGE = Page(page=1, limit=20)


async def _seed(notifications, user_id: str, n: int):
    await NotificationService.notify(
        notifications, [user_id] * n, title="Avviso", message="Messaggio", type_=NotificationType.SYSTEM
    )
    return notifications.for_user(user_id)


# --------------------------------- Tests --------------------------------------
@pytest.mark.asyncio
async def test_notify_students_only_active_students(notifications, users):
    await users.update("s2", {"isActive": False})
    sent = await NotificationService.notify_students(
        notifications, users, "Nuovo", "Testo", NotificationType.ASSIGNMENT, related_id="as-1"
    )
    assert sent == 1
    assert notifications.for_user("t1") == []
    assert notifications.for_user("s1")[0].read is False


@pytest.mark.asyncio
async def test_list_with_unread_count(notifications, student):
    seeded = await _seed(notifications, "s1", 3)
    await _seed(notifications, "s2", 2)
    await NotificationService.mark_as_read(seeded[0].id, student, notifications)

    items, total, unread = await NotificationService.list_notifications(student, notifications, PAGE)
    assert total == 3 and unread == 2
    assert all(n.userId == "s1" for n in items)

    items, total, unread = await NotificationService.list_notifications(student, notifications, PAGE, unread_only=True)
    assert total == 2
    assert all(not n.read for n in items)


@pytest.mark.asyncio
async def test_mark_read_of_other_user_is_not_found(notifications, student2):
    seeded = await _seed(notifications, "s1", 1)
    with pytest.raises(errors.NotFound):
        await NotificationService.mark_as_read(seeded[0].id, student2, notifications)
    assert notifications.items[seeded[0].id].read is False


@pytest.mark.asyncio
async def test_mark_all_as_read(notifications, student):
    await _seed(notifications, "s1", 3)
    await _seed(notifications, "s2", 1)
    assert await NotificationService.mark_all_as_read(student, notifications) == 3
    assert all(n.read for n in notifications.for_user("s1"))
    assert not notifications.for_user("s2")[0].read


@pytest.mark.asyncio
async def test_delete_only_own(notifications, student, student2):
    seeded = await _seed(notifications, "s1", 1)
    with pytest.raises(errors.NotFound):
        await NotificationService.delete_notification(seeded[0].id, student2, notifications)

    await NotificationService.delete_notification(seeded[0].id, student, notifications)
    assert notifications.for_user("s1") == []
    with pytest.raises(errors.NotFound):
        await NotificationService.delete_notification(seeded[0].id, student, notifications)
