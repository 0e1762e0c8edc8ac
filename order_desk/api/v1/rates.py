# ==============================================================================
# RATES ENDPOINTS - Sell Quotes
# ==============================================================================

from __future__ import annotations

from fastapi import APIRouter

from order_desk.api.dependencies import PriceOracleDep
from order_desk.schemas.base import APIResponse
from order_desk.schemas.rates import SellRates

router = APIRouter(prefix="/rates", tags=["Rates"])


@router.get(
    "",
    response_model=APIResponse[SellRates],
    summary="Current sell rates",
    description="Per-Pi rates offered to sellers in USD and INR.",
)
async def get_rates(oracle: PriceOracleDep) -> APIResponse[SellRates]:
    rates = await oracle.get_sell_rates()
    return APIResponse.ok(data=rates)
