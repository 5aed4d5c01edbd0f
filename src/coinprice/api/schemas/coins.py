"""Pydantic schemas for coin price API."""

from pydantic import BaseModel, ConfigDict, Field


class PriceRequest(BaseModel):
    base: str = Field(min_length=1)  # e.g. "usd", "eur", "btc"


class PriceResponse(BaseModel):
    price: float


class PricesRequest(BaseModel):
    bases: list[str] = Field(min_length=1)


class PricesResponse(BaseModel):
    prices: dict[str, float]  # keyed by lower-cased base currency


class PriceChangeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base: str = Field(min_length=1)
    days_ago: int = Field(alias="daysAgo", ge=0)


class PriceChangeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    price_change: float = Field(alias="priceChange")  # current / historic - 1


class CoinIdsResponse(BaseModel):
    symbol: str
    ids: list[str]  # first entry is what price lookups use
