"""Abstract storage contracts consumed by the lifecycle engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from cloudguard.models.alert import Alert, AlertFilter, AlertStatus
from cloudguard.models.audit import AuditEntry, AuditFilter


class AlertRepository(ABC):
    """Durable alert store keyed by the application-assigned alert id.

    Implementations must make each call atomic for a single record and raise
    PersistenceError when the underlying store fails.
    """

    @abstractmethod
    async def save(self, alert: Alert) -> Alert:
        """Insert a new alert and return it as stored."""
        ...

    @abstractmethod
    async def find_by_id(self, alert_id: str) -> Alert | None: ...

    @abstractmethod
    async def find_all(self, alert_filter: AlertFilter | None = None) -> list[Alert]:
        """Return every alert matching the filter (all alerts if None)."""
        ...

    @abstractmethod
    async def update_status(
        self, alert_id: str, status: AlertStatus, updated_at: datetime
    ) -> Alert | None:
        """Set status and updatedAt; return the updated alert, or None if absent."""
        ...

    @abstractmethod
    async def delete(self, alert_id: str) -> None: ...


class AuditSink(ABC):
    """Append-only audit log."""

    @abstractmethod
    async def append(self, entry: AuditEntry) -> None: ...

    @abstractmethod
    async def query(self, audit_filter: AuditFilter | None = None) -> list[AuditEntry]:
        """Return matching entries, newest first."""
        ...
