import uvicorn

from coinprice.config import settings
from coinprice.logging_conf import setup_logging


def main() -> None:
    setup_logging(settings.log_level)
    uvicorn.run("coinprice.api.main:app", host="0.0.0.0", port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
