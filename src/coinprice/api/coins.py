"""Coin API — spot prices and price change by ticker symbol."""

from typing import Annotated

from fastapi import APIRouter, Depends

from coinprice.api.deps import get_price_change_calculator, get_spot_prices, get_symbol_index
from coinprice.api.schemas.coins import (
    CoinIdsResponse,
    PriceChangeRequest,
    PriceChangeResponse,
    PriceRequest,
    PriceResponse,
    PricesRequest,
    PricesResponse,
)
from coinprice.cache.spot_price import SpotPriceCache
from coinprice.cache.symbol_index import SymbolIndexCache
from coinprice.price_change import PriceChangeCalculator

router = APIRouter(prefix="/coin", tags=["coins"])

SymbolIndexDep = Annotated[SymbolIndexCache, Depends(get_symbol_index)]
SpotPricesDep = Annotated[SpotPriceCache, Depends(get_spot_prices)]
PriceChangeDep = Annotated[PriceChangeCalculator, Depends(get_price_change_calculator)]


@router.get("/{symbol}/ids", response_model=CoinIdsResponse)
async def get_coin_ids(symbol: str, symbol_index: SymbolIndexDep) -> CoinIdsResponse:
    """All CoinGecko ids sharing this symbol, in the order lookups prefer them."""
    ids = await symbol_index.candidates(symbol)
    return CoinIdsResponse(symbol=symbol, ids=ids)


@router.post("/{symbol}/price", response_model=PriceResponse)
async def get_coin_price(
    symbol: str, body: PriceRequest, symbol_index: SymbolIndexDep, spot_prices: SpotPricesDep
) -> PriceResponse:
    coin_id = await symbol_index.resolve(symbol)
    price = await spot_prices.get_price(coin_id, body.base)
    return PriceResponse(price=price)


@router.post("/{symbol}/prices", response_model=PricesResponse)
async def get_coin_prices(
    symbol: str, body: PricesRequest, symbol_index: SymbolIndexDep, spot_prices: SpotPricesDep
) -> PricesResponse:
    """Quote one coin in several base currencies."""
    coin_id = await symbol_index.resolve(symbol)
    prices = await spot_prices.get_prices(coin_id, body.bases)
    return PricesResponse(prices=prices)


@router.post("/{symbol}/price-change", response_model=PriceChangeResponse)
async def get_coin_price_change(
    symbol: str, body: PriceChangeRequest, symbol_index: SymbolIndexDep, calculator: PriceChangeDep
) -> PriceChangeResponse:
    coin_id = await symbol_index.resolve(symbol)
    change = await calculator.get_price_change(coin_id, body.base, body.days_ago)
    return PriceChangeResponse(price_change=change)
