from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tableside.api.error_handling import register_exception_handlers
from tableside.api.middleware.access_log import AccessLogMiddleware
from tableside.api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from tableside.api.routes.health import router as health_router
from tableside.api.routes.metrics import router as metrics_router
from tableside.api.routes.order_requests import router as order_requests_router
from tableside.api.routes.orders import router as orders_router
from tableside.api.routes.pages import router as pages_router
from tableside.api.routes.table_orders import router as table_orders_router
from tableside.infrastructure.cache.redis_client import reset_redis_clients
from tableside.infrastructure.db.session import dispose_engines
from tableside.infrastructure.observability.logging_config import configure_logging
from tableside.infrastructure.observability.otel import configure_otel

logger = logging.getLogger(__name__)


def _cors_allow_origins() -> list[str]:
    env = os.getenv("APP_ENV", "dev").lower()

    # dev/test: any origin, no credentials
    if env in {"dev", "test"}:
        return ["*"]

    raw_value = os.getenv("CORS_ALLOW_ORIGINS", "")
    origins = [origin.strip() for origin in raw_value.split(",") if origin.strip()]
    if not origins:
        logger.warning("cors_allowlist_empty", extra={"state": env})
    return origins


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("app_started", extra={"state": os.getenv("APP_ENV", "dev")})
    try:
        yield
    finally:
        dispose_engines()
        reset_redis_clients()
        logger.info("app_stopped")


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="Tableside Ordering", version="0.1.0", lifespan=lifespan)
    register_exception_handlers(app)
    for router in (
        health_router,
        metrics_router,
        orders_router,
        table_orders_router,
        order_requests_router,
        pages_router,
    ):
        app.include_router(router)

    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    configure_otel(app)
    return app


app = create_app()
