from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    port: int = 3000
    log_level: str = "INFO"
    coingecko_base_url: str = "https://api.coingecko.com"
    coingecko_api_key: str = ""
    request_timeout: float = 5.0  # seconds, per upstream call
    rate_per_second: float = 10.0
    symbol_index_ttl: float = 4 * 60 * 60
    spot_price_ttl: float = 60 * 60
    historic_cache_capacity: int = 10_000
    warm_symbol_index: bool = False

    class Config:
        env_file = ".env"


settings = Settings()
