# ==============================================================================
# PRICE ORACLE - Spot Rates for Sell Quotes
# ==============================================================================

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import httpx

from order_desk.core.constants import TransactionConstants
from order_desk.core.settings import settings
from order_desk.integrations.base import HTTPServiceClient
from order_desk.schemas.rates import SellRates
from order_desk.utils.helpers import parse_decimal

logger = logging.getLogger(__name__)


class CoinGeckoPriceOracle(HTTPServiceClient):
    """
    Sell rates derived from the CoinGecko simple price endpoint.

    The offered rate is the spot price scaled by ``SELL_RATE_FACTOR``
    and rounded to four decimal places.
    """

    dependency = "price oracle"

    def __init__(
        self,
        url: Optional[str] = None,
        asset_id: Optional[str] = None,
        factor: Optional[Decimal] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(timeout=timeout, transport=transport)
        self._url = url or settings.PRICE_ORACLE_URL
        self._asset_id = asset_id or settings.PRICE_ORACLE_ASSET_ID
        self._factor = factor if factor is not None else settings.SELL_RATE_FACTOR

    def _scaled(self, spot: Decimal) -> Decimal:
        return (spot * self._factor).quantize(
            Decimal(TransactionConstants.RATE_PLACES),
            rounding=ROUND_HALF_UP,
        )

    async def get_sell_rates(self) -> SellRates:
        """
        Fetch current per-Pi sell rates in USD and INR.

        Raises:
            DependencyFailureError: If the oracle is unreachable or its
                answer lacks a usable price
        """
        response = await self._request(
            "GET",
            self._url,
            operation="quote",
            params={"ids": self._asset_id, "vs_currencies": "usd,inr"},
        )
        if response.status_code != 200:
            raise self._failure("quote", f"HTTP {response.status_code}")

        body = self._json(response, "quote")
        prices = body.get(self._asset_id) if isinstance(body, dict) else None
        if not isinstance(prices, dict):
            raise self._failure("quote", f"no price for {self._asset_id}")

        usd = parse_decimal(prices.get("usd"))
        inr = parse_decimal(prices.get("inr"))
        if usd is None or inr is None or usd <= 0 or inr <= 0:
            raise self._failure("quote", f"unusable price {prices!r}")

        rates = SellRates(usd=self._scaled(usd), inr=self._scaled(inr))
        logger.debug(f"Sell rates: {rates.usd} USD / {rates.inr} INR")
        return rates
