"""Alert status state machine.

    New → Acknowledged → In-Progress → Resolved

Resolved is terminal. No transition skips a stage or moves backward.
"""

from __future__ import annotations

from cloudguard.models.alert import AlertStatus

INITIAL_STATUS = AlertStatus.NEW

TRANSITIONS: dict[AlertStatus, frozenset[AlertStatus]] = {
    AlertStatus.NEW: frozenset({AlertStatus.ACKNOWLEDGED}),
    AlertStatus.ACKNOWLEDGED: frozenset({AlertStatus.IN_PROGRESS}),
    AlertStatus.IN_PROGRESS: frozenset({AlertStatus.RESOLVED}),
    AlertStatus.RESOLVED: frozenset(),
}


def parse_status(value: str | AlertStatus) -> AlertStatus | None:
    """Return the AlertStatus for ``value``, or None if it names no status."""
    try:
        return AlertStatus(value)
    except ValueError:
        return None


def allowed_next(current: AlertStatus) -> list[AlertStatus]:
    """Legal successors of ``current`` in declaration order."""
    successors = TRANSITIONS[current]
    return [status for status in AlertStatus if status in successors]


def can_transition(current: AlertStatus, target: AlertStatus) -> bool:
    return target in TRANSITIONS[current]


def is_terminal(status: AlertStatus) -> bool:
    return not TRANSITIONS[status]
