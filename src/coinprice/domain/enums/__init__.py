from coinprice.domain.enums.error_kind import ErrorKind

__all__ = [
    "ErrorKind",
]
