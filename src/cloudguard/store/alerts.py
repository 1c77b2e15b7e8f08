"""MongoAlertRepository — async Motor CRUD for the alerts collection."""

from __future__ import annotations

from datetime import datetime

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import TypeAdapter
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from cloudguard.errors import PersistenceError
from cloudguard.models.alert import Alert, AlertFilter, AlertStatus
from cloudguard.store.base import AlertRepository

COLLECTION = "alerts"
_NO_OBJECT_ID = {"_id": 0}
_datetime_adapter: TypeAdapter[datetime] = TypeAdapter(datetime)


class MongoAlertRepository(AlertRepository):
    def __init__(
        self,
        db: AsyncIOMotorDatabase,  # type: ignore[type-arg]
        collection: str = COLLECTION,
    ) -> None:
        self._col = db[collection]

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("id", 1)], unique=True)
        await self._col.create_index([("status", 1), ("severity", 1)])
        await self._col.create_index([("category", 1)])

    async def save(self, alert: Alert) -> Alert:
        doc = alert.model_dump(mode="json", by_alias=True)
        try:
            await self._col.insert_one(doc)
        except DuplicateKeyError as exc:
            raise PersistenceError(f"Duplicate alert id {alert.id}") from exc
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to save alert {alert.id}: {exc}") from exc
        return alert

    async def find_by_id(self, alert_id: str) -> Alert | None:
        try:
            doc = await self._col.find_one({"id": alert_id}, _NO_OBJECT_ID)
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to load alert {alert_id}: {exc}") from exc
        return Alert.model_validate(doc) if doc else None

    async def find_all(self, alert_filter: AlertFilter | None = None) -> list[Alert]:
        query = alert_filter.as_query() if alert_filter else {}
        try:
            cursor = self._col.find(query, _NO_OBJECT_ID)
            return [Alert.model_validate(doc) async for doc in cursor]
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to list alerts: {exc}") from exc

    async def update_status(
        self, alert_id: str, status: AlertStatus, updated_at: datetime
    ) -> Alert | None:
        try:
            doc = await self._col.find_one_and_update(
                {"id": alert_id},
                {
                    "$set": {
                        "status": status.value,
                        "updatedAt": _datetime_adapter.dump_python(updated_at, mode="json"),
                    }
                },
                projection=_NO_OBJECT_ID,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to update alert {alert_id}: {exc}") from exc
        return Alert.model_validate(doc) if doc else None

    async def delete(self, alert_id: str) -> None:
        try:
            await self._col.delete_one({"id": alert_id})
        except PyMongoError as exc:
            raise PersistenceError(f"Failed to delete alert {alert_id}: {exc}") from exc
