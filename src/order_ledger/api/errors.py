"""
order_ledger.api.errors

Exception-to-response mapping for the HTTP surface.

Responsibilities:
- Map malformed request bodies to `400 {"error": ...}`.
- Map ledger failures to their status with the generic message.
- Catch anything unexpected as a `500` without leaking internals.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from order_ledger.errors import LedgerError
from order_ledger.observability.logging import get_logger

log = get_logger(__name__)


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "invalid request body"


async def _client_input_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    message = _format_validation_error(exc)
    log.info("client_input_error", error=message)
    return JSONResponse(status_code=HTTP_400_BAD_REQUEST, content={"error": message})


async def _ledger_error(_: Request, exc: LedgerError) -> JSONResponse:
    log.warning("ledger_error", error_type=type(exc).__name__, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _unhandled_error(_: Request, exc: Exception) -> JSONResponse:
    log.error("unhandled_exception", error_type=type(exc).__name__, exc_info=exc)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Internal server error"}
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _client_input_error)  # type: ignore[arg-type]
    app.add_exception_handler(LedgerError, _ledger_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error)


# --- Module Notes -----------------------------------------------------------
# Every failure path returns a JSON object with a single `error` key.
