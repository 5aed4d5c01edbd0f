"""Tests for HistoricPriceCache — day buckets, bulk fill, LRU bound and fallback."""

import asyncio

import pytest

from coinprice.cache.historic_price import HistoricPriceCache, day_bucket, target_day
from coinprice.domain.models.coin import PricePoint
from coinprice.exceptions import PriceNotFound, UpstreamError

NOW = 1_700_000_000  # 2023-11-14 22:13:20 UTC
TODAY = 1_699_920_000  # 2023-11-14 00:00:00 UTC
DAY = 86_400


def _daily_series(days: int, start_price: float = 100.0) -> list[PricePoint]:
    """One point per day from ``days`` days ago up to now, oldest first, like CoinGecko."""
    points = [
        PricePoint(ms_timestamp=(TODAY - d * DAY) * 1000 + 123, price=start_price + (days - d))
        for d in range(days, 0, -1)
    ]
    points.append(PricePoint(ms_timestamp=NOW * 1000, price=start_price + days))
    return points


class TestDayBucket:
    def test_truncates_to_utc_midnight(self):
        assert day_bucket(NOW) == TODAY
        assert day_bucket(TODAY) == TODAY
        assert day_bucket(TODAY + DAY - 1) == TODAY

    def test_target_day(self):
        assert target_day(0, NOW) == TODAY
        assert target_day(7, NOW) == TODAY - 7 * DAY


class TestGetOrFetch:
    async def test_miss_fetches_series_with_widened_window(self, coingecko, clock):
        coingecko.get_daily_series.return_value = _daily_series(8)
        cache = HistoricPriceCache(coingecko, capacity=100, clock=clock)

        price = await cache.get_or_fetch("bitcoin", "usd", 7)

        assert price == 101.0
        coingecko.get_daily_series.assert_awaited_once_with("bitcoin", "usd", 8)

    async def test_whole_series_is_cached(self, coingecko, clock):
        coingecko.get_daily_series.return_value = _daily_series(8)
        cache = HistoricPriceCache(coingecko, capacity=100, clock=clock)

        await cache.get_or_fetch("bitcoin", "usd", 7)
        assert len(cache.store) == 9

        # Nearer days come from the same fetch
        assert await cache.get_or_fetch("bitcoin", "usd", 3) == 105.0
        assert await cache.get_or_fetch("bitcoin", "USD", 0) == 108.0
        assert coingecko.get_daily_series.await_count == 1

    async def test_falls_back_to_oldest_point(self, coingecko, clock):
        # Series that skips the requested day entirely
        coingecko.get_daily_series.return_value = [
            PricePoint(ms_timestamp=(TODAY - 2 * DAY) * 1000, price=90.0),
            PricePoint(ms_timestamp=NOW * 1000, price=95.0),
        ]
        cache = HistoricPriceCache(coingecko, capacity=100, clock=clock)

        assert await cache.get_or_fetch("bitcoin", "usd", 30) == 90.0

    async def test_same_day_points_collapse_last_write_wins(self, coingecko, clock):
        cache = HistoricPriceCache(coingecko, capacity=100, clock=clock)
        cache.put_series(
            "bitcoin",
            "usd",
            [
                PricePoint(ms_timestamp=(TODAY - DAY) * 1000 + 1_000, price=10.0),
                PricePoint(ms_timestamp=(TODAY - DAY) * 1000 + 50_000_000, price=11.0),
            ],
        )
        assert len(cache.store) == 1
        assert cache.store.peek(("bitcoin", "usd", TODAY - DAY)) == 11.0
        assert await cache.get_or_fetch("bitcoin", "usd", 1) == 11.0
        coingecko.get_daily_series.assert_not_awaited()

    async def test_empty_series_raises_price_not_found(self, coingecko, clock):
        coingecko.get_daily_series.return_value = []
        cache = HistoricPriceCache(coingecko, capacity=100, clock=clock)
        with pytest.raises(PriceNotFound):
            await cache.get_or_fetch("bitcoin", "usd", 7)

    async def test_upstream_error_propagates(self, coingecko, clock):
        coingecko.get_daily_series.side_effect = UpstreamError("coingecko returned 500", status=500)
        cache = HistoricPriceCache(coingecko, capacity=100, clock=clock)
        with pytest.raises(UpstreamError) as exc_info:
            await cache.get_or_fetch("bitcoin", "usd", 7)
        assert exc_info.value.status == 500
        assert len(cache.store) == 0

    async def test_negative_days_rejected(self, coingecko, clock):
        cache = HistoricPriceCache(coingecko, capacity=100, clock=clock)
        with pytest.raises(ValueError):
            await cache.get_or_fetch("bitcoin", "usd", -1)

    async def test_target_moves_with_the_clock(self, coingecko, clock):
        coingecko.get_daily_series.return_value = _daily_series(8)
        cache = HistoricPriceCache(coingecko, capacity=100, clock=clock)
        await cache.get_or_fetch("bitcoin", "usd", 7)

        # Next UTC day: 7 days ago is now a day that was cached as 6 days ago
        clock.advance(DAY)
        assert await cache.get_or_fetch("bitcoin", "usd", 7) == 102.0
        assert coingecko.get_daily_series.await_count == 1

    async def test_concurrent_misses_share_one_fetch(self, coingecko, clock):
        async def slow_series(coin_id, base, days):
            await asyncio.sleep(0.01)
            return _daily_series(days)

        coingecko.get_daily_series.side_effect = slow_series
        cache = HistoricPriceCache(coingecko, capacity=100, clock=clock)

        prices = await asyncio.gather(*(cache.get_or_fetch("bitcoin", "usd", 7) for _ in range(5)))
        assert prices == [101.0] * 5
        assert coingecko.get_daily_series.await_count == 1


class TestCapacity:
    async def test_size_never_exceeds_capacity(self, coingecko, clock):
        coingecko.get_daily_series.return_value = _daily_series(8)
        cache = HistoricPriceCache(coingecko, capacity=5, clock=clock)

        # Only the five newest points fit, so the target (oldest) day is evicted
        assert await cache.get_or_fetch("bitcoin", "usd", 7) == 100.0
        assert len(cache.store) == 5
        assert ("bitcoin", "usd", TODAY - 7 * DAY) not in cache.store
        assert ("bitcoin", "usd", TODAY) in cache.store

    async def test_read_protects_entry_from_eviction(self, coingecko, clock):
        cache = HistoricPriceCache(coingecko, capacity=2, clock=clock)
        cache.put_series("bitcoin", "usd", [PricePoint(ms_timestamp=(TODAY - DAY) * 1000, price=1.0)])
        cache.put_series("ethereum", "usd", [PricePoint(ms_timestamp=(TODAY - DAY) * 1000, price=2.0)])

        assert await cache.get_or_fetch("bitcoin", "usd", 1) == 1.0
        cache.put_series("solana", "usd", [PricePoint(ms_timestamp=(TODAY - DAY) * 1000, price=3.0)])

        assert ("bitcoin", "usd", TODAY - DAY) in cache.store
        assert ("ethereum", "usd", TODAY - DAY) not in cache.store
