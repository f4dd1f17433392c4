# bookstore/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookstore.core.config import get_settings
from bookstore.core.exceptions import BaseServiceError
from bookstore.core.logging_config import configure_logging
from bookstore.core.security import require_auth
from bookstore.database import engine
from bookstore.routes import health, transactions

API_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().LOG_LEVEL)
    try:
        yield  # This is where the app runs
    finally:
        await engine.dispose()


app = FastAPI(
    title="Bookstore API",
    version=API_VERSION,
    lifespan=lifespan
)


def _envelope(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


@app.exception_handler(BaseServiceError)
async def service_error_handler(request: Request, exc: BaseServiceError):
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %r", exc.__class__.__name__, request.method, request.url.path, exc.__cause__)
    return _envelope(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _envelope(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request body"
    if errors:
        first = errors[0]
        error = (first.get("ctx") or {}).get("error")
        message = str(error) if error else first.get("msg", message)
    return _envelope(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


app.include_router(health.router)  # Health check should be accessible without auth
app.include_router(transactions.router, dependencies=[require_auth()])


@app.get("/")
async def root():
    return {"success": True, "message": "Bookstore API is running!", "version": API_VERSION}
