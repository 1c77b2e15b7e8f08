"""Severity classification for incoming findings.

A valid severity hint on the finding is used verbatim. Otherwise the
lower-cased description is scanned for high-severity keywords, then for
low-severity keywords, in list order; the first substring match decides.
Anything else is Medium.

Matching is plain substring containment, not word-boundary matching:
"publicly" matches "public" and "misconfiguration" matches "configuration".
"""

from __future__ import annotations

from typing import Any

from cloudguard.models.alert import Finding, Severity

HIGH_SEVERITY_KEYWORDS: tuple[str, ...] = (
    "critical",
    "urgent",
    "severe",
    "exploit",
    "vulnerability",
    "breach",
    "compromise",
    "unauthorized access",
    "data leak",
    "malware",
    "ransomware",
    "public",
    "exposed",
)

LOW_SEVERITY_KEYWORDS: tuple[str, ...] = (
    "informational",
    "minor",
    "warning",
    "recommendation",
    "best practice",
    "configuration",
    "versioning",
)


def parse_severity(value: Any) -> Severity | None:
    if not isinstance(value, str):
        return None
    try:
        return Severity(value)
    except ValueError:
        return None


def first_match(text: str, keywords: tuple[str, ...]) -> str | None:
    """Return the first keyword contained in ``text``, or None."""
    for keyword in keywords:
        if keyword in text:
            return keyword
    return None


def classify(finding: Finding) -> Severity:
    """Return the severity for a validated finding."""
    hinted = parse_severity(finding.severity)
    if hinted is not None:
        return hinted

    description = (finding.description or "").lower()
    if first_match(description, HIGH_SEVERITY_KEYWORDS):
        return Severity.HIGH
    if first_match(description, LOW_SEVERITY_KEYWORDS):
        return Severity.LOW
    return Severity.MEDIUM
