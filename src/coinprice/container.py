from dependency_injector import containers, providers

from coinprice.cache.historic_price import HistoricPriceCache
from coinprice.cache.spot_price import SpotPriceCache
from coinprice.cache.symbol_index import SymbolIndexCache
from coinprice.config import Settings
from coinprice.infra.http.rate_limited_client import RateLimitedClient
from coinprice.infra.price.coingecko import API_KEY_HEADER, CoinGeckoClient
from coinprice.price_change import PriceChangeCalculator


def build_http_client(rate_per_second: float, timeout: float, api_key: str) -> RateLimitedClient:
    headers = {API_KEY_HEADER: api_key} if api_key else None
    return RateLimitedClient(rate_per_second=rate_per_second, timeout=timeout, headers=headers)


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(modules=["coinprice.api.deps"])

    settings = providers.Singleton(Settings)

    http_client = providers.Singleton(
        build_http_client,
        rate_per_second=settings.provided.rate_per_second,
        timeout=settings.provided.request_timeout,
        api_key=settings.provided.coingecko_api_key,
    )

    coingecko = providers.Singleton(
        CoinGeckoClient,
        http_client=http_client,
        base_url=settings.provided.coingecko_base_url,
    )

    symbol_index = providers.Singleton(
        SymbolIndexCache,
        client=coingecko,
        ttl=settings.provided.symbol_index_ttl,
    )

    spot_prices = providers.Singleton(
        SpotPriceCache,
        client=coingecko,
        ttl=settings.provided.spot_price_ttl,
    )

    historic_prices = providers.Singleton(
        HistoricPriceCache,
        client=coingecko,
        capacity=settings.provided.historic_cache_capacity,
    )

    price_change = providers.Singleton(
        PriceChangeCalculator,
        historic_prices=historic_prices,
        spot_prices=spot_prices,
    )
