"""FastAPI application entrypoint for the voucher pool."""

import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.router import api_router
from .core.config import get_settings
from .core.database import init_db
from .core.logging import setup_logging
from .core.middleware import RequestContextMiddleware

logger = logging.getLogger(__name__)


async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed request bodies and parameters with 400 instead of 422."""

    logger.info("rejected %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def create_app() -> FastAPI:
    """Instantiate and configure the FastAPI application."""
    setup_logging()
    app = FastAPI(title="Voucher Pool API", version="0.1.0")
    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(RequestValidationError, _bad_request)
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()


def run() -> None:
    """Create missing tables and serve the API with uvicorn."""

    settings = get_settings()
    init_db()
    uvicorn.run("voucher_pool.main:app", host=settings.host, port=settings.port)
