"""Unit tests for the Motor-backed stores — collection fully mocked."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from cloudguard.errors import PersistenceError
from cloudguard.models.alert import Alert, AlertCategory, AlertFilter, AlertStatus
from cloudguard.models.audit import AuditAction, AuditEntry, AuditFilter
from cloudguard.store.alerts import MongoAlertRepository
from cloudguard.store.audit import MongoAuditSink


class _FakeCursor:
    """Minimal async cursor supporting sort/limit chaining and async iteration."""

    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs
        self.sort_args: tuple[Any, ...] | None = None
        self.limit_arg: int | None = None

    def sort(self, *args: Any) -> _FakeCursor:
        self.sort_args = args
        return self

    def limit(self, n: int) -> _FakeCursor:
        self.limit_arg = n
        return self

    def __aiter__(self) -> _FakeCursor:
        self._iter = iter(self._docs)
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


@pytest.fixture
def collection() -> MagicMock:
    col = MagicMock()
    col.insert_one = AsyncMock()
    col.find_one = AsyncMock(return_value=None)
    col.find_one_and_update = AsyncMock(return_value=None)
    col.delete_one = AsyncMock()
    col.create_index = AsyncMock()
    return col


@pytest.fixture
def db(collection: MagicMock) -> MagicMock:
    database = MagicMock()
    database.__getitem__.return_value = collection
    return database


def _doc(alert: Alert) -> dict[str, Any]:
    return alert.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# MongoAlertRepository
# ---------------------------------------------------------------------------


async def test_save_writes_camel_case_document(
    db: MagicMock, collection: MagicMock, make_alert: Callable[..., Alert]
) -> None:
    repo = MongoAlertRepository(db)
    alert = make_alert()
    assert await repo.save(alert) == alert

    db.__getitem__.assert_called_with("alerts")
    [doc] = collection.insert_one.await_args.args
    assert doc["id"] == alert.id
    assert doc["status"] == "New"
    assert doc["createdAt"] == "2024-01-01T12:00:00Z"
    assert "created_at" not in doc


async def test_save_duplicate_key_becomes_persistence_error(
    db: MagicMock, collection: MagicMock, make_alert: Callable[..., Alert]
) -> None:
    collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
    with pytest.raises(PersistenceError, match="Duplicate alert id"):
        await MongoAlertRepository(db).save(make_alert())


async def test_find_by_id_round_trips_document(
    db: MagicMock, collection: MagicMock, make_alert: Callable[..., Alert]
) -> None:
    alert = make_alert()
    collection.find_one.return_value = _doc(alert)

    found = await MongoAlertRepository(db).find_by_id(alert.id)
    assert found == alert
    collection.find_one.assert_awaited_once_with({"id": alert.id}, {"_id": 0})


async def test_find_by_id_missing(db: MagicMock) -> None:
    assert await MongoAlertRepository(db).find_by_id("nope") is None


async def test_find_all_builds_equality_query(
    db: MagicMock, collection: MagicMock, make_alert: Callable[..., Alert]
) -> None:
    alert = make_alert(category="S3", status="Acknowledged")
    collection.find = MagicMock(return_value=_FakeCursor([_doc(alert)]))

    found = await MongoAlertRepository(db).find_all(
        AlertFilter(category=AlertCategory.S3, status=AlertStatus.ACKNOWLEDGED)
    )
    assert found == [alert]
    collection.find.assert_called_once_with(
        {"status": "Acknowledged", "category": "S3"}, {"_id": 0}
    )


async def test_find_all_without_filter(db: MagicMock, collection: MagicMock) -> None:
    collection.find = MagicMock(return_value=_FakeCursor([]))
    assert await MongoAlertRepository(db).find_all() == []
    collection.find.assert_called_once_with({}, {"_id": 0})


async def test_update_status_is_single_atomic_call(
    db: MagicMock, collection: MagicMock, make_alert: Callable[..., Alert]
) -> None:
    later = datetime(2024, 6, 1, tzinfo=timezone.utc)
    updated = make_alert(status="Acknowledged", updated_at=later)
    collection.find_one_and_update.return_value = _doc(updated)

    result = await MongoAlertRepository(db).update_status(
        updated.id, AlertStatus.ACKNOWLEDGED, later
    )
    assert result == updated
    collection.find_one_and_update.assert_awaited_once_with(
        {"id": updated.id},
        {"$set": {"status": "Acknowledged", "updatedAt": "2024-06-01T00:00:00Z"}},
        projection={"_id": 0},
        return_document=ReturnDocument.AFTER,
    )


async def test_store_failure_becomes_persistence_error(
    db: MagicMock, collection: MagicMock
) -> None:
    collection.delete_one.side_effect = ServerSelectionTimeoutError("no servers")
    with pytest.raises(PersistenceError, match="Failed to delete alert x"):
        await MongoAlertRepository(db).delete("x")


async def test_alert_indexes(db: MagicMock, collection: MagicMock) -> None:
    await MongoAlertRepository(db).ensure_indexes()
    collection.create_index.assert_any_await([("id", 1)], unique=True)


# ---------------------------------------------------------------------------
# MongoAuditSink
# ---------------------------------------------------------------------------


async def test_audit_append(db: MagicMock, collection: MagicMock) -> None:
    entry = AuditEntry(
        action=AuditAction.STATUS_UPDATED,
        alert_id="ALT-1-1",
        old_status=AlertStatus.NEW,
        new_status="Acknowledged",
    )
    await MongoAuditSink(db).append(entry)

    db.__getitem__.assert_called_with("audit_logs")
    [doc] = collection.insert_one.await_args.args
    assert doc["action"] == "STATUS_UPDATED"
    assert doc["alertId"] == "ALT-1-1"
    assert doc["oldStatus"] == "New"
    assert doc["newStatus"] == "Acknowledged"


async def test_audit_query_sorted_newest_first(db: MagicMock, collection: MagicMock) -> None:
    entry = AuditEntry(action=AuditAction.ALERT_DELETED, alert_id="a")
    cursor = _FakeCursor([entry.model_dump(mode="json", by_alias=True)])
    collection.find = MagicMock(return_value=cursor)

    result = await MongoAuditSink(db).query(
        AuditFilter(action=AuditAction.ALERT_DELETED, alert_id="a", limit=5)
    )
    assert result == [entry]
    collection.find.assert_called_once_with({"action": "ALERT_DELETED", "alertId": "a"}, {"_id": 0})
    assert cursor.sort_args == ("timestamp", -1)
    assert cursor.limit_arg == 5


async def test_audit_append_failure_becomes_persistence_error(
    db: MagicMock, collection: MagicMock
) -> None:
    collection.insert_one.side_effect = ServerSelectionTimeoutError("no servers")
    with pytest.raises(PersistenceError):
        await MongoAuditSink(db).append(AuditEntry(action=AuditAction.ALERT_CREATED))


async def test_update_status_uses_same_timestamp_format_as_save(
    db: MagicMock, collection: MagicMock, make_alert: Callable[..., Alert]
) -> None:
    repo = MongoAlertRepository(db)
    alert = make_alert()
    await repo.save(alert)
    [saved_doc] = collection.insert_one.await_args.args

    await repo.update_status(alert.id, AlertStatus.ACKNOWLEDGED, alert.updated_at)
    update_doc = collection.find_one_and_update.await_args.args[1]["$set"]
    assert update_doc["updatedAt"] == saved_doc["updatedAt"]
