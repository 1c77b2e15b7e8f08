"""Alert Pydantic models — findings in, lifecycle-tracked alerts out.

JSON field names are camelCase (``createdAt``, ``updatedAt``) to match the
dashboard client; Python attribute names stay snake_case.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class AlertCategory(str, Enum):
    CVE = "CVE"
    S3 = "S3"
    IAM = "IAM"
    NETWORK = "Network"
    ACTIVITY = "Activity"


class Severity(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class AlertStatus(str, Enum):
    NEW = "New"
    ACKNOWLEDGED = "Acknowledged"
    IN_PROGRESS = "In-Progress"
    RESOLVED = "Resolved"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Finding(BaseModel):
    """Raw security finding submitted by a detection source.

    Fields are loosely typed; the lifecycle engine validates them and audits
    a malformed finding as a failed creation.
    """

    category: Any = None
    severity: Any = None
    description: Any = None


class Alert(_CamelModel):
    """A lifecycle-tracked alert derived from a Finding."""

    id: str
    severity: Severity
    category: AlertCategory
    status: AlertStatus = AlertStatus.NEW
    description: str = Field(min_length=1)
    timestamp: datetime = Field(default_factory=_utcnow)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class AlertFilter(BaseModel):
    """Partial match on severity/status/category; unset fields match anything."""

    severity: Severity | None = None
    status: AlertStatus | None = None
    category: AlertCategory | None = None

    def matches(self, alert: Alert) -> bool:
        return (
            (self.severity is None or alert.severity == self.severity)
            and (self.status is None or alert.status == self.status)
            and (self.category is None or alert.category == self.category)
        )

    def as_query(self) -> dict[str, str]:
        """Return the set fields as a document-store equality query."""
        return {
            key: value.value
            for key, value in (
                ("severity", self.severity),
                ("status", self.status),
                ("category", self.category),
            )
            if value is not None
        }


class SeverityCounts(BaseModel):
    high: int = 0
    medium: int = 0
    low: int = 0


class CategoryCounts(BaseModel):
    cve: int = 0
    s3: int = 0
    iam: int = 0
    network: int = 0
    activity: int = 0


class AlertStatistics(_CamelModel):
    """Aggregate counts over the full alert set."""

    total: int = 0
    new: int = 0
    acknowledged: int = 0
    in_progress: int = 0
    resolved: int = 0
    by_severity: SeverityCounts = Field(default_factory=SeverityCounts)
    by_category: CategoryCounts = Field(default_factory=CategoryCounts)
