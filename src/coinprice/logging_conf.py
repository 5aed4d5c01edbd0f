from logging.config import dictConfig
from typing import Any


def setup_logging(log_level: str = "INFO") -> None:
    """Route app and uvicorn loggers through one plain stdout handler."""
    level = log_level.upper()

    dict_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {
                "format": "%(asctime)s %(levelname)-8s %(name)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "plain",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        "loggers": {
            "uvicorn": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.error": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": level, "handlers": ["console"], "propagate": False},
            "coinprice": {"level": level, "handlers": ["console"], "propagate": False},
            # httpx logs every request at INFO
            "httpx": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        },
    }

    dictConfig(dict_config)
