"""Audit trail models — write-once records of lifecycle actions."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cloudguard.models.alert import AlertCategory, AlertStatus, Severity


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class AuditAction(str, Enum):
    ALERT_CREATED = "ALERT_CREATED"
    ALERT_CREATION_FAILED = "ALERT_CREATION_FAILED"
    STATUS_UPDATED = "STATUS_UPDATED"
    STATUS_UPDATE_FAILED = "STATUS_UPDATE_FAILED"
    ALERT_DELETED = "ALERT_DELETED"
    ALERT_DELETION_FAILED = "ALERT_DELETION_FAILED"


class AuditEntry(BaseModel):
    """A single audit record. Frozen: entries are never updated or deleted."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(default_factory=_new_id)
    action: AuditAction
    alert_id: str | None = None
    old_status: AlertStatus | None = None
    # Free-form on failures: the requested status may not be a legal value.
    new_status: str | None = None
    severity: Severity | None = None
    category: AlertCategory | None = None
    details: str | None = None
    error: str | None = None
    timestamp: datetime = Field(default_factory=_utcnow)


class AuditFilter(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    action: AuditAction | None = None
    alert_id: str | None = None
    limit: int | None = Field(default=None, ge=1)

    def matches(self, entry: AuditEntry) -> bool:
        return (self.action is None or entry.action == self.action) and (
            self.alert_id is None or entry.alert_id == self.alert_id
        )

    def as_query(self) -> dict[str, str]:
        query: dict[str, str] = {}
        if self.action is not None:
            query["action"] = self.action.value
        if self.alert_id is not None:
            query["alertId"] = self.alert_id
        return query
