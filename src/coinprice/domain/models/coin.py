"""Domain types for CoinGecko coin identities and price points."""

from pydantic import BaseModel, ConfigDict


class CoinIdentity(BaseModel):
    """One entry of the provider's coin catalog. Many coins may share a symbol."""

    model_config = ConfigDict(frozen=True)

    id: str
    symbol: str
    name: str


class PricePoint(BaseModel):
    """A single point of a daily price series."""

    model_config = ConfigDict(frozen=True)

    ms_timestamp: int  # Unix epoch in milliseconds, as CoinGecko returns it
    price: float

    @property
    def timestamp(self) -> int:
        return self.ms_timestamp // 1000
