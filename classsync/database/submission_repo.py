from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

from classsync.schemas.submission import Submission, SubmissionFilter


class SubmissionRepo(ABC):
    @abstractmethod
    async def create(self, submission: Submission) -> str:
        """Inserisce una consegna. La coppia (assignmentId, studentId) è unica: duplicato -> Conflict."""
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, submission_id: str) -> Optional[Submission]:
        raise NotImplementedError

    @abstractmethod
    async def find_for_pair(self, assignment_id: str, student_id: str) -> Optional[Submission]:
        raise NotImplementedError

    @abstractmethod
    async def find(self, filt: SubmissionFilter, skip: int = 0, limit: int = 0) -> Sequence[Submission]:
        """Consegne che soddisfano il filtro, dalla più recente."""
        raise NotImplementedError

    @abstractmethod
    async def count(self, filt: SubmissionFilter) -> int:
        raise NotImplementedError

    @abstractmethod
    async def update(self, submission_id: str, fields: Dict[str, Any]) -> Optional[Submission]:
        raise NotImplementedError
