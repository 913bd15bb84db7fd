"""
order_ledger.api

API package for the order ledger service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring, request models and error mapping.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: request parsing and delegation to services.
