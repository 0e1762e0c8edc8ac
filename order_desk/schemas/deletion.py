# ==============================================================================
# DELETION SCHEMAS - Cascading Delete Results
# ==============================================================================

from __future__ import annotations

from typing import List, Optional

from pydantic import Field, computed_field

from order_desk.schemas.base import BaseSchema
from order_desk.schemas.stats import DashboardStats


class DeletionOutcome(BaseSchema):
    """
    Result of deleting one order.

    Attributes:
        transaction_id: Deleted order
        owner_id: Owner of the deleted order
        image_deleted: Whether the proof image was removed from storage
        warnings: Best-effort steps that failed
        dashboard: Statistics after the delete, if they could be computed
        aggregates_current: False when recomputation failed
    """

    transaction_id: str
    owner_id: str
    image_deleted: bool = False
    warnings: List[str] = Field(default_factory=list)
    dashboard: Optional[DashboardStats] = None
    aggregates_current: bool = True


class BulkDeletionReport(BaseSchema):
    """
    Result of removing a user together with all of their orders.

    ``success`` is True only when every order was deleted; the failed
    ids can be retried.
    """

    owner_id: str
    deleted_ids: List[str] = Field(default_factory=list)
    failed_ids: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    identity_deleted: bool = False
    dashboard: Optional[DashboardStats] = None
    aggregates_current: bool = True

    @computed_field
    @property
    def success(self) -> bool:
        return not self.failed_ids
