"""
order_ledger.api.fields

Shared request field types.

Responsibilities:
- Bound integer inputs to what the store's 64-bit columns can hold, so
  out-of-range numbers fail request parsing (400) instead of reaching the driver.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

INT64_MAX = 2**63 - 1

# Symmetric range: an amount is negated for the debit, and -(-2**63) does not fit.
Int64 = Annotated[int, Field(ge=-INT64_MAX, le=INT64_MAX)]


# --- Module Notes -----------------------------------------------------------
# Sign and sufficiency are not checked anywhere; only representability is.
