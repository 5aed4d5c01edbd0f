"""Relative price change between a historic day and now."""

import math

from coinprice.cache.historic_price import HistoricPriceCache
from coinprice.cache.spot_price import SpotPriceCache
from coinprice.exceptions import InvalidHistoricPrice


class PriceChangeCalculator:
    def __init__(self, historic_prices: HistoricPriceCache, spot_prices: SpotPriceCache) -> None:
        self._historic = historic_prices
        self._spot = spot_prices

    async def get_price_change(self, coin_id: str, base: str, days_ago: int) -> float:
        """Return ``current / historic - 1`` for ``coin_id`` in ``base``.

        A zero historic price means CoinGecko had no data for that day, not
        that the coin was worth nothing, so it raises ``InvalidHistoricPrice``.
        """
        historic_price = await self._historic.get_or_fetch(coin_id, base, days_ago)
        if historic_price == 0 or not math.isfinite(historic_price):
            raise InvalidHistoricPrice(coin_id, base, historic_price)

        current_price = await self._spot.get_price(coin_id, base)

        change = current_price / historic_price - 1
        if not math.isfinite(change):
            raise InvalidHistoricPrice(coin_id, base, historic_price)
        return change
