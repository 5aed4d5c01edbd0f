"""Per (id, base) spot price cache with independent TTLs."""

import asyncio
import functools
import logging
import time
from typing import Iterable

from coinprice.cache.cached_value import CachedValue, Clock
from coinprice.cache.single_flight import SingleFlight
from coinprice.exceptions import PriceNotFound, UpstreamError
from coinprice.infra.price.coingecko import CoinGeckoClient

logger = logging.getLogger(__name__)

SpotPriceKey = tuple[str, str]  # (coin id, base currency)

DEFAULT_TTL = 60 * 60


class SpotPriceCache:
    """Spot prices keyed by (coin id, base), each refreshed single-flight on expiry.

    Failures are never cached; the next call retries upstream.
    """

    def __init__(
        self,
        client: CoinGeckoClient,
        ttl: float = DEFAULT_TTL,
        clock: Clock = time.monotonic,
    ) -> None:
        self._client = client
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[SpotPriceKey, CachedValue[float]] = {}
        self._refresh: SingleFlight[SpotPriceKey, float] = SingleFlight()

    async def get_price(self, coin_id: str, base: str) -> float:
        key = (coin_id, base.lower())
        cached = self._entries.get(key)
        if cached is not None and cached.is_fresh(self._ttl, self._clock()):
            return cached.value
        return await self._refresh.do(key, functools.partial(self._fetch, key))

    async def get_prices(self, coin_id: str, bases: Iterable[str]) -> dict[str, float]:
        """Quote ``coin_id`` in several base currencies at once."""
        unique = list(dict.fromkeys(base.lower() for base in bases))
        prices = await asyncio.gather(*(self.get_price(coin_id, base) for base in unique))
        return dict(zip(unique, prices))

    async def _fetch(self, key: SpotPriceKey) -> float:
        coin_id, base = key
        envelope = await self._client.get_spot_price(coin_id, base)

        price_map = envelope.get(coin_id)
        price = price_map.get(base) if isinstance(price_map, dict) else None
        if price is None:
            raise PriceNotFound(coin_id, base)

        try:
            value = float(price)
        except (TypeError, ValueError) as e:
            raise UpstreamError(f"coingecko returned a non-numeric price for {coin_id}/{base}") from e

        self._entries[key] = CachedValue(value=value, produced_at=self._clock())
        logger.debug("Spot price refreshed: %s/%s = %s", coin_id, base, value)
        return value
