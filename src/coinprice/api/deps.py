from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from coinprice.cache.spot_price import SpotPriceCache
from coinprice.cache.symbol_index import SymbolIndexCache
from coinprice.container import Container
from coinprice.price_change import PriceChangeCalculator


@inject
def get_symbol_index(
    symbol_index: SymbolIndexCache = Depends(Provide[Container.symbol_index]),
) -> SymbolIndexCache:
    return symbol_index


@inject
def get_spot_prices(
    spot_prices: SpotPriceCache = Depends(Provide[Container.spot_prices]),
) -> SpotPriceCache:
    return spot_prices


@inject
def get_price_change_calculator(
    price_change: PriceChangeCalculator = Depends(Provide[Container.price_change]),
) -> PriceChangeCalculator:
    return price_change
