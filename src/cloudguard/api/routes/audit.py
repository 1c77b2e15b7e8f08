"""GET /api/audit — read-only view of the audit trail, newest first."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from cloudguard.api.dependencies import get_engine
from cloudguard.lifecycle.engine import AlertLifecycleEngine
from cloudguard.models.audit import AuditAction, AuditEntry, AuditFilter

router = APIRouter()


@router.get("/api/audit", response_model=list[AuditEntry])
async def list_audit_entries(
    action: AuditAction | None = Query(None),
    alert_id: str | None = Query(None, alias="alertId"),
    limit: int = Query(100, ge=1, le=1000),
    engine: AlertLifecycleEngine = Depends(get_engine),
) -> list[AuditEntry]:
    return await engine.get_audit_log(
        AuditFilter(action=action, alert_id=alert_id, limit=limit)
    )
