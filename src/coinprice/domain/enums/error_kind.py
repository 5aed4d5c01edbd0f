from enum import Enum


class ErrorKind(str, Enum):
    """Discriminator for every failure the price lookups can produce."""

    SYMBOL_NOT_FOUND = "symbol_not_found"
    PRICE_NOT_FOUND = "price_not_found"
    INVALID_HISTORIC_PRICE = "invalid_historic_price"
    UPSTREAM = "upstream"
