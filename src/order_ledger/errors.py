"""
order_ledger.errors

Service-level error taxonomy.

Responsibilities:
- Classify store failures into the categories surfaced to callers.
- Carry the generic, client-safe message for each failure.

Malformed request bodies are not modeled here: FastAPI raises
`RequestValidationError` for those and the API layer maps it to a 400.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for failures surfaced to callers as service failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StoreUnavailable(LedgerError):
    """A session, connection or transaction could not be established."""


class TransactionFailure(LedgerError):
    """A step inside an order-placement transaction failed; the transaction was aborted."""

    def __init__(self, message: str, *, step: str) -> None:
        super().__init__(message)
        self.step = step


class DecodeFailure(LedgerError):
    """A stored row could not be decoded back into its entity shape."""


class WriteFailure(LedgerError):
    """A single-document write outside the order-placement transaction failed."""


# --- Module Notes -----------------------------------------------------------
# Messages are generic on purpose; the underlying SQLAlchemy error is chained
# (`raise ... from e`) and logged, never returned to clients.
