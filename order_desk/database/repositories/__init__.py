# ==============================================================================
# REPOSITORIES PACKAGE INITIALIZATION
# ==============================================================================

"""
Repository Pattern Implementation
=================================

Provides data access abstraction through the Repository Pattern:
- BaseRepository: Generic repository interface
- TransactionRepository: Sell order store access
"""

from order_desk.database.repositories.base_repository import BaseRepository
from order_desk.database.repositories.transaction_repository import (
    TransactionRepository,
)

__all__ = [
    "BaseRepository",
    "TransactionRepository",
]
