"""Exception taxonomy for the alert lifecycle.

``LifecycleError`` subclasses are expected business outcomes; each carries a
``kind`` tag the transport layer maps to a client-error response.
``PersistenceError`` is the fault channel for store failures and is kept
outside that hierarchy.
"""

from __future__ import annotations


class CloudGuardError(Exception):
    """Base class for every error raised by this package."""


class LifecycleError(CloudGuardError):
    kind: str = "lifecycle"


class ValidationError(LifecycleError):
    """Malformed finding, alert shape or request."""

    kind = "validation"


class NotFoundError(LifecycleError):
    kind = "not_found"

    def __init__(self, alert_id: str) -> None:
        super().__init__(f"Alert with ID {alert_id} not found")
        self.alert_id = alert_id


class InvalidTransitionError(LifecycleError):
    kind = "invalid_transition"

    def __init__(self, current: str, requested: str, allowed: list[str]) -> None:
        allowed_text = ", ".join(allowed) if allowed else "none (terminal)"
        super().__init__(
            f"Invalid state transition: {current} → {requested}. "
            f"Valid transitions from {current}: {allowed_text}"
        )
        self.current = current
        self.requested = requested
        self.allowed = allowed


class PersistenceError(CloudGuardError):
    """The underlying alert or audit store failed."""
