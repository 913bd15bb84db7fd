"""
order_ledger.api.routers

HTTP routers: health checks, users and orders.
"""

# Package marker.
