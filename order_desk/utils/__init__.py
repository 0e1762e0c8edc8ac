# ==============================================================================
# UTILS PACKAGE INITIALIZATION
# ==============================================================================

"""
Utilities Module
================

Helper functions and utilities:
- ID generators
- Date/time utilities
- Decimal parsing and money formatting
"""

from order_desk.utils.helpers import (
    calculate_page_count,
    contains_ci,
    ensure_utc,
    format_money,
    generate_uuid,
    parse_decimal,
    quantize_money,
    utc_now,
)

__all__ = [
    "calculate_page_count",
    "contains_ci",
    "ensure_utc",
    "format_money",
    "generate_uuid",
    "parse_decimal",
    "quantize_money",
    "utc_now",
]
