# ==============================================================================
# TRANSACTION SCHEMAS - Sell Orders
# ==============================================================================
# Request/Response schemas for sell orders and their status changes
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Optional

from pydantic import (
    AliasChoices,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from order_desk.core.constants import TransactionConstants
from order_desk.schemas.base import BaseSchema, TimestampSchema
from order_desk.schemas.stats import DashboardStats, UserSummary


MONEY_FIELDS = (
    "pi_amount",
    "usd_value",
    "inr_value",
    "sell_rate_usd",
    "sell_rate_inr",
)


class OwnerSnapshot(BaseSchema):
    """Owner identity as captured when the order was submitted."""

    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=64)


class TransactionCreate(BaseSchema):
    """Order submission payload."""

    pi_amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=TransactionConstants.AMOUNT_MAX_DIGITS,
        decimal_places=TransactionConstants.AMOUNT_MAX_PLACES,
        description="Quantity of Pi to sell",
    )
    payment_identifier: str = Field(
        ...,
        max_length=255,
        description="Payout destination, e.g. a UPI id",
    )
    proof_image_ref: str = Field(
        ...,
        description="URL of the uploaded proof-of-payment image",
    )
    sell_rate_usd: Decimal = Field(
        ...,
        gt=0,
        max_digits=TransactionConstants.AMOUNT_MAX_DIGITS,
        decimal_places=TransactionConstants.AMOUNT_MAX_PLACES,
        description="Quoted USD rate per Pi",
    )
    sell_rate_inr: Decimal = Field(
        ...,
        gt=0,
        max_digits=TransactionConstants.AMOUNT_MAX_DIGITS,
        decimal_places=TransactionConstants.AMOUNT_MAX_PLACES,
        description="Quoted INR rate per Pi",
    )
    user_info: OwnerSnapshot = Field(
        default_factory=OwnerSnapshot,
        description="Identity snapshot of the seller",
    )

    @field_validator("payment_identifier", "proof_image_ref")
    @classmethod
    def require_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class Transaction(TimestampSchema):
    """
    Stored sell order.

    Monetary fields carry the decimal string exactly as stored; parse
    them with ``parse_decimal`` before doing arithmetic. Documents
    written by the original web client use camelCase keys and keep
    the owner id inside ``userInfo``, both are accepted here.
    """

    id: str = Field(..., description="Order identifier")
    owner_id: str = Field(
        ...,
        validation_alias=AliasChoices("owner_id", "userId"),
    )

    pi_amount: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("pi_amount", "piAmount"),
    )
    usd_value: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("usd_value", "usdValue"),
    )
    inr_value: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("inr_value", "inrValue"),
    )
    sell_rate_usd: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("sell_rate_usd", "SellRateUsd"),
    )
    sell_rate_inr: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("sell_rate_inr", "SellRateInr"),
    )

    payment_identifier: str = Field(
        "",
        validation_alias=AliasChoices("payment_identifier", "upiId"),
    )
    proof_image_ref: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("proof_image_ref", "imageUrl"),
    )

    status: str = Field(TransactionConstants.STATUS_PENDING)
    user_info: OwnerSnapshot = Field(
        default_factory=OwnerSnapshot,
        validation_alias=AliasChoices("user_info", "userInfo"),
    )
    version: int = Field(1, ge=0)

    @model_validator(mode="before")
    @classmethod
    def fill_legacy_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "createdAt" in data and "created_at" not in data:
            data["created_at"] = data.pop("createdAt")
        if not data.get("owner_id") and not data.get("userId"):
            info = data.get("user_info") or data.get("userInfo") or {}
            if isinstance(info, dict) and info.get("id"):
                data["owner_id"] = str(info["id"])
        return data

    @field_validator(*MONEY_FIELDS, mode="before")
    @classmethod
    def keep_raw_amount(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            return TransactionConstants.STATUS_PENDING
        return str(v).strip().lower()

    @field_validator("user_info", mode="before")
    @classmethod
    def default_snapshot(cls, v: Any) -> Any:
        return v or {}

    @field_validator("version", mode="before")
    @classmethod
    def default_version(cls, v: Any) -> Any:
        return 1 if v is None else v

    @property
    def is_known_status(self) -> bool:
        return self.status in TransactionConstants.all_statuses()


class StatusUpdateRequest(BaseSchema):
    """Admin request to move an order through the lifecycle."""

    target_status: str = Field(..., description="Desired status")
    expected_version: Optional[int] = Field(
        None,
        ge=1,
        description="Reject the change if the order has moved past this version",
    )


class StatusOverrideRequest(BaseSchema):
    """Operational override that bypasses the transition table."""

    status: str = Field(..., description="Status to set")
    reason: Optional[str] = Field(
        None,
        max_length=500,
        description="Why the override was needed",
    )


class TransactionView(BaseSchema):
    """
    One page of a filtered order listing.

    Attributes:
        items: Orders on the requested page, newest first
        total_count: Number of orders matching the filters
        page_count: Number of pages, 0 when nothing matches
        page: Zero-indexed page actually returned
        page_size: Maximum items per page
    """

    items: List[Transaction] = Field(default_factory=list)
    total_count: int = Field(..., ge=0)
    page_count: int = Field(..., ge=0)
    page: int = Field(..., ge=0)
    page_size: int = Field(..., ge=1)


class StatusChangeResult(BaseSchema):
    """
    Outcome of a committed status change.

    ``aggregates_current`` is False when the write succeeded but the
    statistics could not be recomputed afterwards.
    """

    transaction: Transaction
    dashboard: Optional[DashboardStats] = None
    owner_summary: Optional[UserSummary] = None
    aggregates_current: bool = True
