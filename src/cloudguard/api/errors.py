"""Map lifecycle errors to HTTP responses with an ``{"error": message}`` body."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cloudguard.errors import LifecycleError, PersistenceError

# LifecycleError.kind → HTTP status
KIND_STATUS_CODES: dict[str, int] = {
    "validation": 400,
    "invalid_transition": 400,
    "not_found": 404,
}


async def _lifecycle_error(request: Request, exc: LifecycleError) -> JSONResponse:
    status_code = KIND_STATUS_CODES.get(exc.kind, 400)
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


async def _persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc)})


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body that cannot be parsed at all (bad JSON, non-object) → 400.

    Query-string errors keep FastAPI's default 422 response.
    """
    body_errors = [e for e in exc.errors() if (e.get("loc") or ("",))[0] == "body"]
    if not body_errors:
        return await request_validation_exception_handler(request, exc)
    first = body_errors[0]
    location = ".".join(str(part) for part in first["loc"])
    return JSONResponse(status_code=400, content={"error": f"Invalid request body at {location}: {first['msg']}"})


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LifecycleError, _lifecycle_error)  # type: ignore[arg-type]
    app.add_exception_handler(PersistenceError, _persistence_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_error)  # type: ignore[arg-type]
