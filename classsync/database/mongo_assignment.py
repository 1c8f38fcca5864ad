import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from classsync.database.assignment_repo import AssignmentRepo
from classsync.schemas.assignment import Assignment, AssignmentFilter


def assignment_query(filt: AssignmentFilter) -> Dict[str, Any]:
    q: Dict[str, Any] = {}
    if filt.createdBy is not None:
        q["createdBy"] = filt.createdBy
    if filt.isActive is not None:
        q["isActive"] = filt.isActive
    if filt.ids is not None:
        q["id"] = {"$in": list(filt.ids)}
    due: Dict[str, Any] = {}
    if filt.dueAfter is not None:
        due["$gte"] = filt.dueAfter
    if filt.dueBefore is not None:
        due["$lt"] = filt.dueBefore
    if due:
        q["dueDate"] = due
    if filt.createdSince is not None:
        q["createdAt"] = {"$gte": filt.createdSince}
    if filt.search:
        pattern = re.escape(filt.search)
        q["$or"] = [
            {"title": {"$regex": pattern, "$options": "i"}},
            {"description": {"$regex": pattern, "$options": "i"}},
        ]
    return q


class MongoAssignmentRepository(AssignmentRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["assignments"]

    def _from_doc(self, d: dict) -> Assignment:
        base = {k: v for k, v in d.items() if k not in {"_id"}}
        return Assignment(**base)

    def _to_doc_from_model(self, a: Assignment) -> dict:
        doc = a.model_dump()
        doc.setdefault("createdAt", datetime.now(timezone.utc))
        doc.setdefault("isActive", True)
        return doc

    async def create(self, assignment: Assignment) -> str:
        await self.col.insert_one(self._to_doc_from_model(assignment))
        return assignment.id

    async def find_one(self, assignment_id: str) -> Optional[Assignment]:
        d = await self.col.find_one({"id": str(assignment_id)})
        return self._from_doc(d) if d else None

    async def find(self, filt: AssignmentFilter, skip: int = 0, limit: int = 0) -> Sequence[Assignment]:
        cursor = self.col.find(assignment_query(filt)).sort("createdAt", DESCENDING).skip(skip).limit(limit)
        docs: List[dict] = [d async for d in cursor]
        return [self._from_doc(d) for d in docs]

    async def count(self, filt: AssignmentFilter) -> int:
        return await self.col.count_documents(assignment_query(filt))

    async def update(self, assignment_id: str, fields: Dict[str, Any]) -> Optional[Assignment]:
        d = await self.col.find_one_and_update(
            {"id": str(assignment_id)},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        return self._from_doc(d) if d else None

    async def ids_for_teacher(self, teacher_id: str) -> List[str]:
        docs = await self.col.find({"createdBy": str(teacher_id)}, {"_id": 0, "id": 1}).to_list(length=None)
        return [d["id"] for d in docs]

    async def ensure_indexes(self):
        await self.col.create_index("id", unique=True)
        await self.col.create_index([("createdBy", 1), ("isActive", 1)])
        await self.col.create_index([("dueDate", 1), ("isActive", 1)])
        await self.col.create_index([("createdAt", -1)])
