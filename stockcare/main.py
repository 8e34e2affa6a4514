import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from stockcare.config import Settings, get_settings
from stockcare.core.constants import DEFAULT_DASHBOARD_PATH
from stockcare.core.exceptions import StockCareError
from stockcare.core.logging import setup_logging
from stockcare.database import engine, init_db
from stockcare.routers import (
    dashboard_router,
    health_router,
    movements_router,
    products_router,
)

logger = logging.getLogger(__name__)

setup_logging()
settings: Settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_db(engine)
    logger.info("%s started (%s)", settings.APP_NAME, settings.ENVIRONMENT)
    try:
        yield
    finally:
        engine.dispose()


async def stockcare_error_handler(_request: Request, exc: StockCareError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.add_exception_handler(StockCareError, stockcare_error_handler)

app.include_router(health_router)
app.include_router(products_router)
app.include_router(movements_router)
app.include_router(dashboard_router)


@app.get("/")
def root():
    return RedirectResponse(url=DEFAULT_DASHBOARD_PATH, status_code=302)


__all__ = ["app", "root"]
