# ==============================================================================
# DATABASE PACKAGE INITIALIZATION
# ==============================================================================
# Database Abstraction Layer with multi-database support
# ==============================================================================

"""
Database Module
===============

Provides a unified database abstraction layer supporting:
- SQLite (development/testing)
- MongoDB (document store)

Key Components:
- Adapters: Database-specific implementations
- Factory: Dynamic adapter instantiation
- Repositories: Transaction store access
"""

from order_desk.database.factory import DatabaseFactory
from order_desk.database.adapters.base_adapter import BaseDatabaseAdapter

__all__ = [
    "DatabaseFactory",
    "BaseDatabaseAdapter",
]
