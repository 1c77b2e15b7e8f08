"""FastAPI dependency providers.

The lifecycle engine is attached to app.state at startup and retrieved here
via Request injection.
"""

from __future__ import annotations

from fastapi import Request

from cloudguard.lifecycle.engine import AlertLifecycleEngine


def get_engine(request: Request) -> AlertLifecycleEngine:
    return request.app.state.engine  # type: ignore[no-any-return]
