from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from classsync.schemas.notification import Notification, NotificationFilter


class NotificationRepo(ABC):
    @abstractmethod
    async def create_many(self, notifications: Sequence[Notification]) -> int:
        """Inserisce le notifiche e ritorna quante ne sono state salvate."""
        raise NotImplementedError

    @abstractmethod
    async def find(self, filt: NotificationFilter, skip: int = 0, limit: int = 0) -> Sequence[Notification]:
        raise NotImplementedError

    @abstractmethod
    async def count(self, filt: NotificationFilter) -> int:
        raise NotImplementedError

    @abstractmethod
    async def mark_read(self, notification_id: str, user_id: str) -> Optional[Notification]:
        """Segna come letta solo se appartiene a user_id."""
        raise NotImplementedError

    @abstractmethod
    async def mark_all_read(self, user_id: str) -> int:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, notification_id: str, user_id: str) -> bool:
        raise NotImplementedError
