import re
from typing import Any, Dict, List, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from classsync.core.errors import Conflict
from classsync.database.user_repo import UserRepo
from classsync.schemas.user import User, UserFilter


def user_query(filt: UserFilter) -> Dict[str, Any]:
    q: Dict[str, Any] = {}
    if filt.role is not None:
        q["role"] = filt.role.value
    if filt.isActive is not None:
        q["isActive"] = filt.isActive
    if filt.ids is not None:
        q["id"] = {"$in": list(filt.ids)}
    if filt.createdSince is not None:
        q["createdAt"] = {"$gte": filt.createdSince}
    if filt.lastLoginSince is not None:
        q["lastLogin"] = {"$gte": filt.lastLoginSince}
    if filt.search:
        pattern = re.escape(filt.search)
        q["$or"] = [
            {"name": {"$regex": pattern, "$options": "i"}},
            {"email": {"$regex": pattern, "$options": "i"}},
        ]
    return q


class MongoUserRepository(UserRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["users"]

    def _from_doc(self, d: dict) -> User:
        base = {k: v for k, v in d.items() if k not in {"_id"}}
        return User(**base)

    async def create(self, user: User) -> str:
        doc = user.model_dump(mode="python")
        doc["role"] = user.role.value
        try:
            await self.col.insert_one(doc)
        except DuplicateKeyError:
            raise Conflict("User already exists with this email")
        return user.id

    async def find_one(self, user_id: str) -> Optional[User]:
        d = await self.col.find_one({"id": str(user_id)})
        return self._from_doc(d) if d else None

    async def find_by_email(self, email: str) -> Optional[User]:
        d = await self.col.find_one({"email": email.lower()})
        return self._from_doc(d) if d else None

    async def find(self, filt: UserFilter, skip: int = 0, limit: int = 0) -> Sequence[User]:
        cursor = self.col.find(user_query(filt)).sort("createdAt", DESCENDING).skip(skip).limit(limit)
        docs: List[dict] = [d async for d in cursor]
        return [self._from_doc(d) for d in docs]

    async def count(self, filt: UserFilter) -> int:
        return await self.col.count_documents(user_query(filt))

    async def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        fields = {k: (v.value if hasattr(v, "value") else v) for k, v in fields.items()}
        d = await self.col.find_one_and_update(
            {"id": str(user_id)},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        return self._from_doc(d) if d else None

    async def delete(self, user_id: str) -> bool:
        res = await self.col.delete_one({"id": str(user_id)})
        return res.deleted_count > 0

    async def recent_activity(self, limit: int) -> Sequence[User]:
        # in Mongo i null finiscono in fondo con l'ordinamento discendente
        cursor = self.col.find({}).sort("lastLogin", DESCENDING).limit(limit)
        return [self._from_doc(d) async for d in cursor]

    async def ensure_indexes(self):
        await self.col.create_index("id", unique=True)
        await self.col.create_index("email", unique=True)
        await self.col.create_index([("role", 1), ("isActive", 1)])
        await self.col.create_index([("createdAt", -1)])
