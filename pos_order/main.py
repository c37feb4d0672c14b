# main.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse

# Import logging utilities early so that the logger configuration is
# applied before any other modules emit log messages.
from pos_order.logging_config import logger
import json
import time

from pos_order.core.config import Settings, get_settings
from pos_order.exceptions import PosOrderError, PosOrderValidationError
from pos_order.routes.orders import router as orders_router
from pos_order.services.order_service import OrderClient


def create_app(settings: Optional[Settings] = None, order_client: Optional[OrderClient] = None) -> FastAPI:
    """Build the application around one shared :class:`OrderClient`.

    The client is created at startup from ``settings`` (environment by
    default) unless one is passed in, and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.order_client = order_client or OrderClient.from_settings(settings or get_settings())
        try:
            yield
        finally:
            app.state.order_client.close()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=lifespan)

    app.include_router(orders_router)

    @app.exception_handler(PosOrderError)
    async def pos_order_error_handler(request: Request, exc: PosOrderError):
        if isinstance(exc, PosOrderValidationError):
            return ORJSONResponse(status_code=422, content={"detail": exc.message})
        logger.error(json.dumps({
            "event": "pos_order_error",
            "path": request.url.path,
            "detail": exc.message,
            "code": exc.code,
            "status_code": exc.status_code,
        }))
        # upstream error status when the API answered one, otherwise a bad gateway
        status_code = exc.status_code if exc.status_code and exc.status_code >= 400 else 502
        return ORJSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "response": exc.response},
        )

    # -----------------------------------------------------------------
    # Request logging middleware
    # -----------------------------------------------------------------
    @app.middleware("http")  # type: ignore[misc]
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000
        logger.info(json.dumps({
            "event": "http_request",
            "path": request.url.path,
            "method": request.method,
            "status": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }))
        return response

    return app

app = create_app()
