"""
order_ledger.services

Service-layer package.

Responsibilities:
- Own transaction boundaries and persistence decisions.
- Translate store failures into the service error taxonomy.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services are plain Python over a `LedgerStore` or session; tests drive them
# directly against a throwaway SQLite database.
