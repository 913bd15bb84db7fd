"""
order_ledger.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, repositories and the
  transactional ledger store handle.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The store is reached through `LedgerStore`; the coordinator never touches the
# engine or session factory directly.
