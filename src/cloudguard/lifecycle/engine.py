"""AlertLifecycleEngine — the only writer of alert state.

Validates and classifies findings, enforces the status state machine,
aggregates statistics and records every lifecycle action in the audit sink.

Audit writes are best effort: a failing sink is logged and never fails a
successful operation, and never replaces the error of a failed one. Business
errors are always re-raised to the caller after the failure is audited.

The engine holds references to its collaborators only; all alert state lives
in the repository.
"""

from __future__ import annotations

import logging
import random
import time
from collections import Counter
from datetime import datetime, timezone
from typing import Any

from cloudguard.errors import InvalidTransitionError, NotFoundError, PersistenceError, ValidationError
from cloudguard.lifecycle import classifier, transitions
from cloudguard.models.alert import (
    Alert,
    AlertCategory,
    AlertFilter,
    AlertStatistics,
    AlertStatus,
    CategoryCounts,
    Finding,
    Severity,
    SeverityCounts,
)
from cloudguard.models.audit import AuditAction, AuditEntry, AuditFilter
from cloudguard.store.base import AlertRepository, AuditSink

LOGGER = logging.getLogger(__name__)

ID_PREFIX = "ALT"
MAX_ID_ATTEMPTS = 5


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def generate_alert_id() -> str:
    """Return a candidate id of the form ALT-<epoch-millis>-<0..9999>."""
    return f"{ID_PREFIX}-{time.time_ns() // 1_000_000}-{random.randrange(10_000)}"


class AlertLifecycleEngine:
    def __init__(self, repository: AlertRepository, audit_sink: AuditSink) -> None:
        self._repository = repository
        self._audit_sink = audit_sink

    async def create_alert(self, finding: Finding | None) -> Alert:
        """Validate, classify and persist a new alert from ``finding``."""
        try:
            category = _validate_finding(finding)
            now = _utcnow()
            alert = Alert(
                id=await self._allocate_id(),
                severity=classifier.classify(finding),
                category=category,
                status=transitions.INITIAL_STATUS,
                description=finding.description,
                timestamp=now,
                created_at=now,
                updated_at=now,
            )
            saved = await self._repository.save(alert)
        except Exception as exc:
            LOGGER.warning("Alert creation failed: %s", exc)
            await self._record(AuditEntry(action=AuditAction.ALERT_CREATION_FAILED, error=str(exc)))
            raise

        await self._record(
            AuditEntry(
                action=AuditAction.ALERT_CREATED,
                alert_id=saved.id,
                severity=saved.severity,
                category=saved.category,
                details=f"Alert created from {saved.category.value} finding",
            )
        )
        LOGGER.info("Alert %s created (%s/%s)", saved.id, saved.severity.value, saved.category.value)
        return saved

    async def update_alert_status(self, alert_id: str, new_status: Any) -> Alert:
        """Move an alert to ``new_status`` if the state machine allows it."""
        if isinstance(new_status, AlertStatus):
            new_status = new_status.value
        requested = None if new_status is None else str(new_status)
        try:
            if new_status is None or new_status == "":
                raise ValidationError("New status is required")
            if not isinstance(new_status, str):
                raise ValidationError(f"Status must be a string, got {type(new_status).__name__}")

            current = await self._repository.find_by_id(alert_id)
            if current is None:
                raise NotFoundError(alert_id)

            target = transitions.parse_status(new_status)
            if target is None or not transitions.can_transition(current.status, target):
                raise InvalidTransitionError(
                    current.status.value,
                    new_status,
                    [s.value for s in transitions.allowed_next(current.status)],
                )

            updated = await self._repository.update_status(alert_id, target, _utcnow())
            if updated is None:
                raise NotFoundError(alert_id)
        except Exception as exc:
            LOGGER.warning("Status update failed for alert %s: %s", alert_id, exc)
            await self._record(
                AuditEntry(
                    action=AuditAction.STATUS_UPDATE_FAILED,
                    alert_id=alert_id,
                    new_status=requested,
                    error=str(exc),
                )
            )
            raise

        await self._record(
            AuditEntry(
                action=AuditAction.STATUS_UPDATED,
                alert_id=alert_id,
                old_status=current.status,
                new_status=updated.status.value,
            )
        )
        LOGGER.info("Alert %s status updated: %s → %s", alert_id, current.status.value, updated.status.value)
        return updated

    async def get_alerts(self, alert_filter: AlertFilter | None = None) -> list[Alert]:
        alerts = list(await self._repository.find_all(alert_filter or AlertFilter()))
        LOGGER.debug("Retrieved %d alerts", len(alerts))
        return alerts

    async def get_alert_by_id(self, alert_id: str) -> Alert:
        alert = await self._repository.find_by_id(alert_id)
        if alert is None:
            raise NotFoundError(alert_id)
        return alert

    async def delete_alert(self, alert_id: str) -> bool:
        try:
            if await self._repository.find_by_id(alert_id) is None:
                raise NotFoundError(alert_id)
            await self._repository.delete(alert_id)
        except Exception as exc:
            LOGGER.warning("Deletion failed for alert %s: %s", alert_id, exc)
            await self._record(
                AuditEntry(action=AuditAction.ALERT_DELETION_FAILED, alert_id=alert_id, error=str(exc))
            )
            raise

        await self._record(AuditEntry(action=AuditAction.ALERT_DELETED, alert_id=alert_id))
        LOGGER.info("Alert %s deleted", alert_id)
        return True

    async def get_statistics(self) -> AlertStatistics:
        """Aggregate counts by status, severity and category. No side effects."""
        alerts = await self._repository.find_all(AlertFilter())
        by_status = Counter(a.status for a in alerts)
        by_severity = Counter(a.severity for a in alerts)
        by_category = Counter(a.category for a in alerts)

        return AlertStatistics(
            total=len(alerts),
            new=by_status[AlertStatus.NEW],
            acknowledged=by_status[AlertStatus.ACKNOWLEDGED],
            in_progress=by_status[AlertStatus.IN_PROGRESS],
            resolved=by_status[AlertStatus.RESOLVED],
            by_severity=SeverityCounts(
                high=by_severity[Severity.HIGH],
                medium=by_severity[Severity.MEDIUM],
                low=by_severity[Severity.LOW],
            ),
            by_category=CategoryCounts(
                cve=by_category[AlertCategory.CVE],
                s3=by_category[AlertCategory.S3],
                iam=by_category[AlertCategory.IAM],
                network=by_category[AlertCategory.NETWORK],
                activity=by_category[AlertCategory.ACTIVITY],
            ),
        )

    async def get_audit_log(self, audit_filter: AuditFilter | None = None) -> list[AuditEntry]:
        """Return audit entries, newest first."""
        return await self._audit_sink.query(audit_filter or AuditFilter())

    async def _allocate_id(self) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            candidate = generate_alert_id()
            if await self._repository.find_by_id(candidate) is None:
                return candidate
        raise PersistenceError(f"Could not allocate a unique alert id after {MAX_ID_ATTEMPTS} attempts")

    async def _record(self, entry: AuditEntry) -> None:
        try:
            await self._audit_sink.append(entry)
        except Exception:
            LOGGER.warning("Failed to append %s audit entry", entry.action.value, exc_info=True)


def _validate_finding(finding: Finding | None) -> AlertCategory:
    """Check a finding's shape and return its category."""
    if finding is None:
        raise ValidationError("Finding object is required")
    if finding.category is None or finding.category == "":
        raise ValidationError("Finding category is required")
    try:
        if not isinstance(finding.category, str):
            raise ValueError(finding.category)
        category = AlertCategory(finding.category)
    except ValueError:
        raise ValidationError(
            f"Invalid category: {finding.category}. "
            f"Must be one of: {', '.join(c.value for c in AlertCategory)}"
        ) from None
    if finding.description is None:
        raise ValidationError("Finding description is required")
    if not isinstance(finding.description, str):
        raise ValidationError(
            f"Finding description must be a string, got {type(finding.description).__name__}"
        )
    if not finding.description.strip():
        raise ValidationError("Finding description is required")
    return category
