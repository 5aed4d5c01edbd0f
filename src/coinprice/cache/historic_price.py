"""Day-bucketed historic prices in a bounded LRU, filled from daily series."""

import functools
import logging
import time

from coinprice.cache.cached_value import Clock
from coinprice.cache.lru import LRUCache
from coinprice.cache.single_flight import SingleFlight
from coinprice.domain.models.coin import PricePoint
from coinprice.exceptions import PriceNotFound
from coinprice.infra.price.coingecko import CoinGeckoClient

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86_400

DEFAULT_CAPACITY = 10_000

HistoricPriceKey = tuple[str, str, int]  # (coin id, base currency, unix day)


def day_bucket(timestamp: int) -> int:
    """Truncate a Unix timestamp (seconds) to 00:00:00 UTC of its day."""
    return timestamp - timestamp % SECONDS_PER_DAY


def target_day(days_ago: int, now: float) -> int:
    """Start of the UTC day ``days_ago`` full days before today."""
    return day_bucket(int(now)) - days_ago * SECONDS_PER_DAY


class HistoricPriceCache:
    """Historic prices per (coin id, base, UTC day).

    A miss fetches the whole daily series covering the target day and
    stores every point, so later lookups for nearer days are hits.
    """

    def __init__(
        self,
        client: CoinGeckoClient,
        capacity: int = DEFAULT_CAPACITY,
        clock: Clock = time.time,
    ) -> None:
        self._client = client
        self._clock = clock
        self._store: LRUCache[HistoricPriceKey, float] = LRUCache(capacity)
        self._fetches: SingleFlight[tuple[str, str, int], list[PricePoint]] = SingleFlight()

    @property
    def store(self) -> LRUCache[HistoricPriceKey, float]:
        return self._store

    def put_series(self, coin_id: str, base: str, points: list[PricePoint]) -> int:
        """Store a series in one critical section. Returns the eviction count."""
        return self._store.put_many(
            ((coin_id, base, day_bucket(point.timestamp)), point.price) for point in points
        )

    async def get_or_fetch(self, coin_id: str, base: str, days_ago: int) -> float:
        if days_ago < 0:
            raise ValueError(f"days_ago must be >= 0, got {days_ago}")

        base = base.lower()
        key = (coin_id, base, target_day(days_ago, self._clock()))
        price = self._store.get(key)
        if price is not None:
            return price

        # CoinGecko counts 'days' back from now excluding the oldest day, so widen by one
        days = days_ago + 1
        points = await self._fetches.do(
            (coin_id, base, days),
            functools.partial(self._fetch_series, coin_id, base, days),
        )

        price = self._store.get(key)
        if price is not None:
            return price

        # Daily granularity may not line up with the target day; the oldest point is the anchor
        logger.debug("No %s/%s point for day %d, using oldest point", coin_id, base, key[2])
        return points[0].price

    async def _fetch_series(self, coin_id: str, base: str, days: int) -> list[PricePoint]:
        points = await self._client.get_daily_series(coin_id, base, days)
        if not points:
            raise PriceNotFound(coin_id, base)
        evicted = self.put_series(coin_id, base, points)
        logger.info(
            "Cached %d daily %s/%s prices (%d days, %d evicted)", len(points), coin_id, base, days, evicted
        )
        return points
