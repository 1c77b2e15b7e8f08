"""Shared pytest fixtures for the CloudGuard test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

import pytest

from cloudguard.lifecycle.engine import AlertLifecycleEngine
from cloudguard.models.alert import Alert, Finding
from cloudguard.store.memory import InMemoryAlertRepository, InMemoryAuditSink


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def alert_repository() -> InMemoryAlertRepository:
    return InMemoryAlertRepository()


@pytest.fixture
def audit_sink() -> InMemoryAuditSink:
    return InMemoryAuditSink()


@pytest.fixture
def engine(
    alert_repository: InMemoryAlertRepository, audit_sink: InMemoryAuditSink
) -> AlertLifecycleEngine:
    return AlertLifecycleEngine(alert_repository, audit_sink)


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_finding() -> Callable[..., Finding]:
    """Factory: create a Finding with sensible defaults, override via kwargs."""

    def _factory(**kwargs: Any) -> Finding:
        defaults: dict[str, Any] = {
            "category": "CVE",
            "description": "Outdated package detected on build host",
        }
        defaults.update(kwargs)
        return Finding(**defaults)

    return _factory


@pytest.fixture
def make_alert() -> Callable[..., Alert]:
    def _factory(**kwargs: Any) -> Alert:
        ts = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        defaults: dict[str, Any] = {
            "id": "ALT-1704110400000-42",
            "severity": "High",
            "category": "CVE",
            "status": "New",
            "description": "Critical remote exploit found",
            "timestamp": ts,
            "created_at": ts,
            "updated_at": ts,
        }
        defaults.update(kwargs)
        return Alert(**defaults)

    return _factory
