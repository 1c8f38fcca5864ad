from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

from classsync.schemas.user import User, UserFilter


class UserRepo(ABC):
    @abstractmethod
    async def create(self, user: User) -> str:
        """Inserisce un utente. Email duplicata -> Conflict."""
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def find(self, filt: UserFilter, skip: int = 0, limit: int = 0) -> Sequence[User]:
        """Utenti che soddisfano il filtro, dal più recente."""
        raise NotImplementedError

    @abstractmethod
    async def count(self, filt: UserFilter) -> int:
        raise NotImplementedError

    @abstractmethod
    async def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        """Cancella definitivamente un utente. True se qualcosa è stato cancellato."""
        raise NotImplementedError

    @abstractmethod
    async def recent_activity(self, limit: int) -> Sequence[User]:
        """Utenti ordinati per ultimo accesso (chi non ha mai fatto login in fondo)."""
        raise NotImplementedError
