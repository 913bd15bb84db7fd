"""
order_ledger.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for the `users` and `orders` collections.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories are intentionally thin; transaction boundaries belong to the
# ledger store guard and the services.
