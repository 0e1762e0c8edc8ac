# ==============================================================================
# DATABASE ADAPTERS PACKAGE
# ==============================================================================

"""
Database Adapters
=================

Provides unified interface implementations for different databases:
- BaseDatabaseAdapter: Abstract interface definition
- MongoDBAdapter: MongoDB using Motor async driver
- SQLiteAdapter: SQLite using aiosqlite
"""

from order_desk.database.adapters.base_adapter import BaseDatabaseAdapter
from order_desk.database.adapters.mongodb_adapter import MongoDBAdapter
from order_desk.database.adapters.sqlite_adapter import SQLiteAdapter

__all__ = [
    "BaseDatabaseAdapter",
    "MongoDBAdapter",
    "SQLiteAdapter",
]
