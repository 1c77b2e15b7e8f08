"""MongoAuditSink — append-only Motor writer for the audit_logs collection."""

from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from cloudguard.errors import PersistenceError
from cloudguard.models.audit import AuditEntry, AuditFilter
from cloudguard.store.base import AuditSink

COLLECTION = "audit_logs"


class MongoAuditSink(AuditSink):
    def __init__(
        self,
        db: AsyncIOMotorDatabase,  # type: ignore[type-arg]
        collection: str = COLLECTION,
    ) -> None:
        self._col = db[collection]

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("timestamp", -1)])
        await self._col.create_index([("alertId", 1), ("timestamp", -1)])
        await self._col.create_index([("action", 1)])

    async def append(self, entry: AuditEntry) -> None:
        doc = entry.model_dump(mode="json", by_alias=True)
        try:
            await self._col.insert_one(doc)
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to append audit entry {entry.action.value}: {exc}") from exc

    async def query(self, audit_filter: AuditFilter | None = None) -> list[AuditEntry]:
        audit_filter = audit_filter or AuditFilter()
        try:
            cursor = self._col.find(audit_filter.as_query(), {"_id": 0}).sort("timestamp", -1)
            if audit_filter.limit is not None:
                cursor = cursor.limit(audit_filter.limit)
            return [AuditEntry.model_validate(doc) async for doc in cursor]
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to query audit log: {exc}") from exc
