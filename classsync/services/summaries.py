"""
Riepiloghi (utente, assignment) da allegare ai documenti restituiti al client.

Una sola query per pagina: gli id vengono raccolti e risolti con un filtro ``ids``.
Un riferimento a un utente cancellato resta ``None``.
"""
from typing import Any, Dict, List, Sequence

from classsync.database.assignment_repo import AssignmentRepo
from classsync.database.user_repo import UserRepo
from classsync.schemas.assignment import Assignment, AssignmentFilter, AssignmentSummary
from classsync.schemas.submission import Submission
from classsync.schemas.user import UserFilter, UserSummary


async def assignment_summaries(repo: AssignmentRepo, ids: List[str]) -> Dict[str, AssignmentSummary]:
    if not ids:
        return {}
    found = await repo.find(AssignmentFilter(ids=list(set(ids))))
    return {a.id: AssignmentSummary(id=a.id, title=a.title, dueDate=a.dueDate) for a in found}


async def user_summaries(repo: UserRepo, ids: List[str]) -> Dict[str, UserSummary]:
    if not ids:
        return {}
    found = await repo.find(UserFilter(ids=list(set(ids))))
    return {u.id: UserSummary(id=u.id, name=u.name, email=u.email, role=u.role) for u in found}


async def with_creator(items: Sequence[Assignment], users: UserRepo) -> List[Dict[str, Any]]:
    """Assignment + ``creator`` (nome, email e ruolo di chi l'ha creato)."""
    u_map = await user_summaries(users, [a.createdBy for a in items])
    rows = []
    for a in items:
        row = a.model_dump()
        row["creator"] = u_map.get(a.createdBy)
        rows.append(row)
    return rows


async def with_student(items: Sequence[Submission], users: UserRepo) -> List[Dict[str, Any]]:
    u_map = await user_summaries(users, [s.studentId for s in items])
    rows = []
    for s in items:
        row = s.model_dump()
        row["student"] = u_map.get(s.studentId)
        rows.append(row)
    return rows
