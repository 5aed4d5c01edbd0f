import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.requests import Request
from starlette.responses import JSONResponse

from coinprice import __version__
from coinprice.api.coins import router as coins_router
from coinprice.container import Container
from coinprice.domain.enums import ErrorKind
from coinprice.exceptions import CoinPriceError, UpstreamError

logger = logging.getLogger("coinprice.api")

_NOT_FOUND_KINDS = {ErrorKind.SYMBOL_NOT_FOUND, ErrorKind.PRICE_NOT_FOUND}


def status_for_error(exc: CoinPriceError) -> int:
    """Map a lookup failure to the HTTP status returned to the caller."""
    if exc.kind in _NOT_FOUND_KINDS:
        return 404
    if exc.kind is ErrorKind.INVALID_HISTORIC_PRICE:
        return 502
    if isinstance(exc, UpstreamError) and exc.status is not None and exc.status >= 400:
        return exc.status
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = Container()
    app.state.container = container
    if container.settings().warm_symbol_index:
        try:
            await container.symbol_index().warm()
        except UpstreamError as e:
            logger.warning("Symbol index warmup failed, will refresh on first request: %s", e)
    yield
    await container.http_client().close()


app = FastAPI(title="coinprice", version=__version__, lifespan=lifespan)


@app.exception_handler(CoinPriceError)
async def coin_price_error_handler(request: Request, exc: CoinPriceError):
    status = status_for_error(exc)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status, content={"detail": exc.message, "kind": exc.kind.value})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("Unhandled error on %s %s:\n%s", request.method, request.url.path, "".join(tb))
    return JSONResponse(status_code=500, content={"detail": str(exc)})


app.include_router(coins_router)


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}
