# ==============================================================================
# API PACKAGE INITIALIZATION
# ==============================================================================

"""
API Module
==========

FastAPI routers and endpoint definitions:
- Dependencies: Authentication, database access, services
- Routers: Transactions, Users, Dashboard, Rates
"""

from order_desk.api.router import api_router

__all__ = ["api_router"]
