from typing import Any, Dict, List, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from classsync.core.errors import Conflict
from classsync.database.submission_repo import SubmissionRepo
from classsync.schemas.submission import Submission, SubmissionFilter


def submission_query(filt: SubmissionFilter) -> Dict[str, Any]:
    q: Dict[str, Any] = {}
    if filt.assignmentId is not None:
        q["assignmentId"] = filt.assignmentId
    elif filt.assignmentIds is not None:
        q["assignmentId"] = {"$in": list(filt.assignmentIds)}
    if filt.studentId is not None:
        q["studentId"] = filt.studentId
    if filt.status is not None:
        q["status"] = filt.status.value
    if filt.createdSince is not None:
        q["createdAt"] = {"$gte": filt.createdSince}
    return q


class MongoSubmissionRepository(SubmissionRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["submissions"]

    def _from_doc(self, d: dict) -> Submission:
        base = {k: v for k, v in d.items() if k not in {"_id"}}
        return Submission(**base)

    async def create(self, submission: Submission) -> str:
        doc = submission.model_dump()
        doc["status"] = submission.status.value
        try:
            await self.col.insert_one(doc)
        except DuplicateKeyError:
            # due richieste quasi simultanee: vince la prima, l'indice blocca la seconda
            raise Conflict("You have already submitted this assignment")
        return submission.id

    async def find_one(self, submission_id: str) -> Optional[Submission]:
        d = await self.col.find_one({"id": str(submission_id)})
        return self._from_doc(d) if d else None

    async def find_for_pair(self, assignment_id: str, student_id: str) -> Optional[Submission]:
        d = await self.col.find_one({"assignmentId": str(assignment_id), "studentId": str(student_id)})
        return self._from_doc(d) if d else None

    async def find(self, filt: SubmissionFilter, skip: int = 0, limit: int = 0) -> Sequence[Submission]:
        cursor = self.col.find(submission_query(filt)).sort("submittedAt", DESCENDING).skip(skip).limit(limit)
        docs: List[dict] = [d async for d in cursor]
        return [self._from_doc(d) for d in docs]

    async def count(self, filt: SubmissionFilter) -> int:
        return await self.col.count_documents(submission_query(filt))

    async def update(self, submission_id: str, fields: Dict[str, Any]) -> Optional[Submission]:
        fields = {k: (v.value if hasattr(v, "value") else v) for k, v in fields.items()}
        d = await self.col.find_one_and_update(
            {"id": str(submission_id)},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        return self._from_doc(d) if d else None

    async def ensure_indexes(self):
        await self.col.create_index("id", unique=True)
        await self.col.create_index([("assignmentId", 1), ("studentId", 1)], unique=True)
        await self.col.create_index([("assignmentId", 1), ("status", 1)])
        await self.col.create_index([("studentId", 1), ("status", 1)])
