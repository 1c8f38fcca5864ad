from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from classsync.schemas.assignment import Assignment, AssignmentFilter


class AssignmentRepo(ABC):
    @abstractmethod
    async def create(self, assignment: Assignment) -> str:
        """Inserisce un assignment (id già generato nel service) e ne ritorna l'ID."""
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, assignment_id: str) -> Optional[Assignment]:
        """Ritorna un assignment per ID, oppure None se non esiste."""
        raise NotImplementedError

    @abstractmethod
    async def find(self, filt: AssignmentFilter, skip: int = 0, limit: int = 0) -> Sequence[Assignment]:
        """Assignment che soddisfano il filtro, dal più recente. limit=0 significa nessun limite."""
        raise NotImplementedError

    @abstractmethod
    async def count(self, filt: AssignmentFilter) -> int:
        raise NotImplementedError

    @abstractmethod
    async def update(self, assignment_id: str, fields: Dict[str, Any]) -> Optional[Assignment]:
        """Aggiorna i campi indicati e ritorna il documento aggiornato (None se non esiste)."""
        raise NotImplementedError

    @abstractmethod
    async def ids_for_teacher(self, teacher_id: str) -> List[str]:
        """ID di tutti gli assignment creati dal teacher, attivi o no."""
        raise NotImplementedError
