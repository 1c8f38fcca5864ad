from typing import Any, Dict, List, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from classsync.database.notification_repo import NotificationRepo
from classsync.schemas.notification import Notification, NotificationFilter


def notification_query(filt: NotificationFilter) -> Dict[str, Any]:
    q: Dict[str, Any] = {}
    if filt.userId is not None:
        q["userId"] = filt.userId
    if filt.unreadOnly:
        q["read"] = False
    return q


class MongoNotificationRepository(NotificationRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["notifications"]

    def _from_doc(self, d: dict) -> Notification:
        base = {k: v for k, v in d.items() if k not in {"_id"}}
        return Notification(**base)

    async def create_many(self, notifications: Sequence[Notification]) -> int:
        if not notifications:
            return 0
        docs = []
        for n in notifications:
            doc = n.model_dump()
            doc["type"] = n.type.value
            doc["relatedType"] = n.relatedType.value if n.relatedType else None
            docs.append(doc)
        res = await self.col.insert_many(docs)
        return len(res.inserted_ids)

    async def find(self, filt: NotificationFilter, skip: int = 0, limit: int = 0) -> Sequence[Notification]:
        cursor = self.col.find(notification_query(filt)).sort("createdAt", DESCENDING).skip(skip).limit(limit)
        docs: List[dict] = [d async for d in cursor]
        return [self._from_doc(d) for d in docs]

    async def count(self, filt: NotificationFilter) -> int:
        return await self.col.count_documents(notification_query(filt))

    async def mark_read(self, notification_id: str, user_id: str) -> Optional[Notification]:
        d = await self.col.find_one_and_update(
            {"id": str(notification_id), "userId": str(user_id)},
            {"$set": {"read": True}},
            return_document=ReturnDocument.AFTER,
        )
        return self._from_doc(d) if d else None

    async def mark_all_read(self, user_id: str) -> int:
        res = await self.col.update_many({"userId": str(user_id), "read": False}, {"$set": {"read": True}})
        return res.modified_count

    async def delete(self, notification_id: str, user_id: str) -> bool:
        res = await self.col.delete_one({"id": str(notification_id), "userId": str(user_id)})
        return res.deleted_count > 0

    async def ensure_indexes(self):
        await self.col.create_index("id", unique=True)
        await self.col.create_index([("userId", 1), ("read", 1)])
        await self.col.create_index([("userId", 1), ("createdAt", -1)])
        await self.col.create_index([("type", 1), ("createdAt", -1)])
