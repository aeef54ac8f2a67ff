import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from courtly.app.core.config import settings
from courtly.app.core.errors import BookingError
from courtly.app.core.logging_config import configure_logging
from courtly.app.core.redis_client import close_redis, init_redis
from courtly.app.routers.schemas import CARD_FIELDS, ErrorOut
import courtly.app.routers.availability as availability
import courtly.app.routers.catalog as catalog
import courtly.app.routers.health as health
import courtly.app.routers.reservations as reservations


configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_redis()
    try:
        yield
    finally:
        await close_redis()


app = FastAPI(
    title="Courtly Booking API",
    lifespan=lifespan,
)

# Browser clients are served from a separate origin.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=ErrorOut(error=exc.message).model_dump())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = {str(err["loc"][-1]) for err in exc.errors() if err.get("loc")}
    message = "Missing card details" if fields and fields <= set(CARD_FIELDS) else "Missing booking details"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorOut(error=message).model_dump(),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorOut(error="Internal server error").model_dump(),
    )


app.include_router(health.router, prefix=settings.API_PREFIX)
app.include_router(catalog.router, prefix=settings.API_PREFIX)
app.include_router(availability.router, prefix=settings.API_PREFIX)
app.include_router(reservations.router, prefix=settings.API_PREFIX)
