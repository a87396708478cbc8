# app/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI

from app.adapters.base import OrderSourceAdapter
from app.adapters.registry import build_adapter
from app.api.errors import register_error_handlers
from app.api.origin_gate import OriginGate, OriginGateMiddleware
from app.api.routers.order_lookup import debug_router
from app.api.routers.order_lookup import router as order_lookup_router
from app.core.config import AppSettings, get_settings
from app.core.logging import setup_logging
from app.metrics import router as metrics_router

logger = logging.getLogger("helphub")


def create_app(
    settings: Optional[AppSettings] = None,
    *,
    order_source: Optional[OrderSourceAdapter] = None,
    upstream_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the service from an explicit settings value.

    order_source / upstream_transport replace the real Shopify calls
    (tests pass an httpx.MockTransport).
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        logger.info(
            "Help Hub Order API up: shop=%s version=%s protocol=%s mode=%s",
            settings.SHOP or "<unset>",
            settings.ADMIN_VERSION,
            settings.UPSTREAM_PROTOCOL,
            settings.LOOKUP_MODE,
        )
        if settings.allowed_origins:
            logger.info("ALLOWED_ORIGINS: %s", settings.allowed_origins)
        else:
            logger.warning("ALLOWED_ORIGIN is empty: every origin is accepted (not for production)")
        if not settings.is_configured:
            logger.warning("SHOP / ADMIN_TOKEN missing: /order-lookup will answer 500")
        yield

    app = FastAPI(
        title="Help Hub Order API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.order_source = order_source or build_adapter(
        settings, transport=upstream_transport
    )

    app.add_middleware(
        OriginGateMiddleware, gate=OriginGate(settings.allowed_origins)
    )
    register_error_handlers(app)

    app.include_router(order_lookup_router)
    app.include_router(metrics_router)
    # introspection only; switch off in production with DEBUG_ROUTES=false
    if settings.DEBUG_ROUTES:
        app.include_router(debug_router)

    return app


def _build_default_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.APP_LOG_LEVEL or None)
    return create_app(settings)


app = _build_default_app()
