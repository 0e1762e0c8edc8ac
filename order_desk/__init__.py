# ==============================================================================
# ORDER DESK PACKAGE INITIALIZATION
# ==============================================================================
# Sell-order lifecycle and aggregation backend with FastAPI
# Supports: SQLite (development/testing), MongoDB (document store)
# Architecture: Repository Pattern, Service Layer, Factory Pattern
# ==============================================================================

"""
Pi Order Desk
=============

Backend for reviewing and settling user sell orders.

Features:
---------
- Order status state machine with explicit transition table
- Dashboard and per-user statistics derived from the order set
- Cascading delete of orders, proof images and derived aggregates
- Filtered, paginated admin views and CSV export
- Multi-database support (SQLite, MongoDB)

Usage:
------
    from order_desk.main import app

    # Run with uvicorn
    uvicorn order_desk.main:app --reload
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
