"""CoinGecko client — coin catalog, spot prices and daily price series."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from coinprice.domain.models.coin import CoinIdentity, PricePoint
from coinprice.exceptions import UpstreamError
from coinprice.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

BASE_URL = "https://api.coingecko.com"

# Header CoinGecko expects for demo-plan API keys
API_KEY_HEADER = "x-cg-demo-api-key"

SpotPriceEnvelope = dict[str, dict[str, float]]


class CoinGeckoClient:
    """Thin wrapper over the three CoinGecko endpoints the caches need.

    Every failure (transport error, timeout, non-2xx status, unexpected body)
    surfaces as ``UpstreamError`` carrying the HTTP status when there is one.
    Nothing is retried here apart from what the transport does for
    connection errors.
    """

    def __init__(self, http_client: RateLimitedClient, base_url: str = BASE_URL) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = await self._http.get(url, params=params)
        except (httpx.TimeoutException, TimeoutError) as e:
            logger.warning("CoinGecko request timed out: %s", path)
            raise UpstreamError(f"coingecko request to {path} timed out") from e
        except httpx.HTTPError as e:
            logger.warning("CoinGecko request failed: %s (%s)", path, e)
            raise UpstreamError(f"coingecko request to {path} failed: {e}") from e

        if response.status_code == 429:
            logger.info("CoinGecko 429 rate limit on %s", path)
            raise UpstreamError("coingecko rate limit exceeded", status=429)

        if not 200 <= response.status_code < 300:
            logger.warning("CoinGecko returned %d for %s", response.status_code, path)
            raise UpstreamError(
                f"coingecko returned {response.status_code} for {path}",
                status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"coingecko returned invalid json for {path}") from e

    async def list_coins(self) -> list[CoinIdentity]:
        """GET /coins/list — the full catalog, unpaginated."""
        data = await self._get_json("/api/v3/coins/list")
        if not isinstance(data, list):
            raise UpstreamError("coingecko coin list is not a list")

        coins: list[CoinIdentity] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            coin_id = item.get("id")
            symbol = item.get("symbol")
            if not coin_id or not symbol:
                continue
            try:
                coins.append(CoinIdentity(id=coin_id, symbol=symbol, name=item.get("name") or coin_id))
            except ValidationError as e:
                raise UpstreamError(f"coingecko returned a malformed coin entry: {item!r}") from e
        return coins

    async def get_spot_price(self, coin_id: str, base: str) -> SpotPriceEnvelope:
        """GET /simple/price. An unknown id or base yields ``{}``, not an error."""
        data = await self._get_json(
            "/api/v3/simple/price",
            params={"ids": coin_id, "vs_currencies": base},
        )
        if not isinstance(data, dict):
            raise UpstreamError("coingecko spot price response is not an object")
        return data

    async def get_daily_series(self, coin_id: str, base: str, days: int) -> list[PricePoint]:
        """GET /coins/{id}/market_chart with daily interval, oldest point first."""
        data = await self._get_json(
            f"/api/v3/coins/{coin_id}/market_chart",
            params={"vs_currency": base, "days": str(days), "interval": "daily"},
        )
        if not isinstance(data, dict):
            raise UpstreamError("coingecko market chart response is not an object")

        raw_points = data.get("prices") or []
        if not isinstance(raw_points, list):
            raise UpstreamError("coingecko market chart prices is not a list")

        points: list[PricePoint] = []
        for entry in raw_points:
            try:
                ms_timestamp, price = entry
                points.append(PricePoint(ms_timestamp=int(ms_timestamp), price=float(price)))
            except (TypeError, ValueError) as e:
                raise UpstreamError(f"coingecko returned a malformed price point: {entry!r}") from e
        return points
