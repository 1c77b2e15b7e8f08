"""In-memory implementations of the storage contracts.

Used by the test suite and by ``storage_backend: memory`` for running the
service without MongoDB. Records are copied on the way in and out so callers
cannot mutate stored state.
"""

from __future__ import annotations

from datetime import datetime

from cloudguard.errors import PersistenceError
from cloudguard.models.alert import Alert, AlertFilter, AlertStatus
from cloudguard.models.audit import AuditEntry, AuditFilter
from cloudguard.store.base import AlertRepository, AuditSink


class InMemoryAlertRepository(AlertRepository):
    def __init__(self) -> None:
        self._alerts: dict[str, Alert] = {}

    async def save(self, alert: Alert) -> Alert:
        if alert.id in self._alerts:
            raise PersistenceError(f"Duplicate alert id {alert.id}")
        self._alerts[alert.id] = alert.model_copy()
        return alert.model_copy()

    async def find_by_id(self, alert_id: str) -> Alert | None:
        alert = self._alerts.get(alert_id)
        return alert.model_copy() if alert else None

    async def find_all(self, alert_filter: AlertFilter | None = None) -> list[Alert]:
        alert_filter = alert_filter or AlertFilter()
        return [a.model_copy() for a in self._alerts.values() if alert_filter.matches(a)]

    async def update_status(
        self, alert_id: str, status: AlertStatus, updated_at: datetime
    ) -> Alert | None:
        alert = self._alerts.get(alert_id)
        if alert is None:
            return None
        updated = alert.model_copy(update={"status": status, "updated_at": updated_at})
        self._alerts[alert_id] = updated
        return updated.model_copy()

    async def delete(self, alert_id: str) -> None:
        self._alerts.pop(alert_id, None)

    def __len__(self) -> int:
        return len(self._alerts)


class InMemoryAuditSink(AuditSink):
    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []

    async def append(self, entry: AuditEntry) -> None:
        self._entries.append(entry)

    async def query(self, audit_filter: AuditFilter | None = None) -> list[AuditEntry]:
        audit_filter = audit_filter or AuditFilter()
        matched = [e for e in reversed(self._entries) if audit_filter.matches(e)]
        if audit_filter.limit is not None:
            matched = matched[: audit_filter.limit]
        return matched

    @property
    def entries(self) -> list[AuditEntry]:
        """All entries in append order."""
        return list(self._entries)
