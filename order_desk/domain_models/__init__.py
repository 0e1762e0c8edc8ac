# ==============================================================================
# DOMAIN MODELS PACKAGE INITIALIZATION
# ==============================================================================

"""
Domain Models
=============

SQLAlchemy ORM models used by the SQL adapter:
- TransactionRecord: Sell orders
"""

from order_desk.domain_models.base import SQLBase, TimestampMixin
from order_desk.domain_models.transaction import TransactionRecord

__all__ = [
    "SQLBase",
    "TimestampMixin",
    "TransactionRecord",
]
