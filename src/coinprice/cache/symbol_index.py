"""Symbol → CoinGecko id index, rebuilt wholesale from the coin list."""

import logging
import time
from typing import Iterable, Mapping

from coinprice.cache.cached_value import CachedValue, Clock
from coinprice.cache.single_flight import SingleFlight
from coinprice.domain.models.coin import CoinIdentity
from coinprice.exceptions import SymbolNotFound
from coinprice.infra.price.coingecko import CoinGeckoClient

logger = logging.getLogger(__name__)

SymbolIndex = dict[str, list[str]]

# Symbols shared by several coins where CoinGecko's first entry is rarely the
# one callers mean. Applied after grouping, so these always win.
ID_OVERRIDES: dict[str, str] = {
    "boo": "spookyswap",
    "comp": "compound-governance-token",
    "ftt": "ftx-token",
    "time": "wonderland",
    "uni": "uniswap",
}

DEFAULT_TTL = 4 * 60 * 60

_INDEX_KEY = "symbol-index"


def build_symbol_index(
    coins: Iterable[CoinIdentity],
    overrides: Mapping[str, str] = ID_OVERRIDES,
) -> SymbolIndex:
    """Group coin ids by symbol in catalog order, then apply ``overrides``.

    Every list in the result is non-empty. Ambiguous symbols without an
    override keep catalog order, so the first-seen coin is the default.
    """
    index: SymbolIndex = {}
    for coin in coins:
        if not coin.symbol or not coin.id:
            continue
        index.setdefault(coin.symbol, []).append(coin.id)

    for symbol, coin_id in overrides.items():
        if coin_id:
            index[symbol] = [coin_id]

    return index


class SymbolIndexCache:
    """Time-bounded symbol index with single-flight refresh.

    A stale index is never served: if the refresh fails the caller gets the
    ``UpstreamError``, since a failed refresh says nothing about whether the
    old mapping still matches the provider's ids.
    """

    def __init__(
        self,
        client: CoinGeckoClient,
        ttl: float = DEFAULT_TTL,
        overrides: Mapping[str, str] | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self._client = client
        self._ttl = ttl
        self._overrides = dict(ID_OVERRIDES if overrides is None else overrides)
        self._clock = clock
        self._cached: CachedValue[SymbolIndex] | None = None
        self._refresh: SingleFlight[str, SymbolIndex] = SingleFlight()

    @property
    def is_fresh(self) -> bool:
        cached = self._cached
        return cached is not None and cached.is_fresh(self._ttl, self._clock())

    async def get_index(self) -> SymbolIndex:
        cached = self._cached
        if cached is not None and cached.is_fresh(self._ttl, self._clock()):
            return cached.value
        return await self._refresh.do(_INDEX_KEY, self._rebuild)

    async def warm(self) -> None:
        """Force a rebuild, joining one already in flight."""
        await self._refresh.do(_INDEX_KEY, self._rebuild)

    async def candidates(self, symbol: str) -> list[str]:
        index = await self.get_index()
        ids = index.get(symbol)
        if not ids:
            raise SymbolNotFound(symbol)
        return list(ids)

    async def resolve(self, symbol: str) -> str:
        index = await self.get_index()
        ids = index.get(symbol)
        if not ids:
            raise SymbolNotFound(symbol)
        return ids[0]

    async def _rebuild(self) -> SymbolIndex:
        logger.info("Refreshing symbol index from CoinGecko coin list")
        coins = await self._client.list_coins()
        index = build_symbol_index(coins, self._overrides)
        # Swap in one assignment; readers see the old index or the new one
        self._cached = CachedValue(value=index, produced_at=self._clock())
        logger.info("Symbol index rebuilt: %d coins, %d symbols", len(coins), len(index))
        return index
