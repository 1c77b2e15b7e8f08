"""Alert routes under /api/alerts — thin mapping onto AlertLifecycleEngine."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from cloudguard.api.dependencies import get_engine
from cloudguard.lifecycle.engine import AlertLifecycleEngine
from cloudguard.models.alert import (
    Alert,
    AlertCategory,
    AlertFilter,
    AlertStatistics,
    AlertStatus,
    Finding,
    Severity,
)

router = APIRouter(prefix="/api/alerts")


class StatusUpdate(BaseModel):
    status: Any = None


class DeleteResponse(BaseModel):
    message: str


@router.get("", response_model=list[Alert])
async def list_alerts(
    severity: Severity | None = Query(None),
    status: AlertStatus | None = Query(None),
    category: AlertCategory | None = Query(None),
    engine: AlertLifecycleEngine = Depends(get_engine),
) -> list[Alert]:
    return await engine.get_alerts(
        AlertFilter(severity=severity, status=status, category=category)
    )


# Registered before /{alert_id} so the literal path wins.
@router.get("/stats/summary", response_model=AlertStatistics)
async def alert_statistics(
    engine: AlertLifecycleEngine = Depends(get_engine),
) -> AlertStatistics:
    return await engine.get_statistics()


@router.get("/{alert_id}", response_model=Alert)
async def get_alert(
    alert_id: str,
    engine: AlertLifecycleEngine = Depends(get_engine),
) -> Alert:
    return await engine.get_alert_by_id(alert_id)


@router.post("", response_model=Alert, status_code=201)
async def create_alert(
    finding: Finding | None = None,
    engine: AlertLifecycleEngine = Depends(get_engine),
) -> Alert:
    return await engine.create_alert(finding)


@router.put("/{alert_id}/status", response_model=Alert)
async def update_alert_status(
    alert_id: str,
    body: StatusUpdate | None = None,
    engine: AlertLifecycleEngine = Depends(get_engine),
) -> Alert:
    return await engine.update_alert_status(alert_id, body.status if body else None)


@router.delete("/{alert_id}", response_model=DeleteResponse)
async def delete_alert(
    alert_id: str,
    engine: AlertLifecycleEngine = Depends(get_engine),
) -> DeleteResponse:
    await engine.delete_alert(alert_id)
    return DeleteResponse(message="Alert deleted successfully")
