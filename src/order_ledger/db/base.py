"""
order_ledger.db.base

SQLAlchemy declarative base.

Responsibilities:
- Provide a shared DeclarativeBase for the ledger's ORM models.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# --- Module Notes -----------------------------------------------------------
# All ORM models inherit from `Base` so `init_db` creates every ledger table.
