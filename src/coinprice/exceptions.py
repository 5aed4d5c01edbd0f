"""Error taxonomy shared by the provider client, the caches and the API layer."""

from coinprice.domain.enums import ErrorKind


class CoinPriceError(Exception):
    """Base for all lookup failures. ``kind`` tells them apart at the boundary."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SymbolNotFound(CoinPriceError):
    kind = ErrorKind.SYMBOL_NOT_FOUND

    def __init__(self, symbol: str) -> None:
        super().__init__(f"no coingecko id found for symbol {symbol!r}")
        self.symbol = symbol


class PriceNotFound(CoinPriceError):
    kind = ErrorKind.PRICE_NOT_FOUND

    def __init__(self, coin_id: str, base: str) -> None:
        super().__init__(f"no {base} price found for {coin_id}")
        self.coin_id = coin_id
        self.base = base


class InvalidHistoricPrice(CoinPriceError):
    """Historic anchor price is zero or otherwise unusable as a divisor."""

    kind = ErrorKind.INVALID_HISTORIC_PRICE

    def __init__(self, coin_id: str, base: str, price: float) -> None:
        super().__init__(f"invalid historic {base} price {price!r} for {coin_id}")
        self.coin_id = coin_id
        self.base = base
        self.price = price


class UpstreamError(CoinPriceError):
    """Price provider call failed. ``status`` is the upstream HTTP status, if any."""

    kind = ErrorKind.UPSTREAM

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status

    @property
    def rate_limited(self) -> bool:
        return self.status == 429
