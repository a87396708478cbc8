# app/api/routers/order_lookup_routes.py
from __future__ import annotations

import time
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from app.api.deps import get_app_settings, get_lookup_service
from app.api.errors import LookupServiceError
from app.api.routers.order_lookup_schemas import (
    DebugOriginsResponse,
    ErrorResponse,
    OrderLookupRequest,
    OrderLookupResponse,
)
from app.core.config import AppSettings
from app.metrics import LOOKUP_LAT, LOOKUPS
from app.services.order_lookup_service import OrderLookupService

_OUTCOMES = {
    "VALIDATION": "invalid",
    "NOT_CONFIGURED": "not_configured",
    "ORDER_NOT_FOUND": "order_not_found",
    "ITEMS_NOT_FOUND": "items_not_found",
}


def register(router: APIRouter) -> None:
    @router.get("/")
    async def liveness() -> Dict[str, Any]:
        return {"ok": True, "service": "Help Hub Order API"}

    @router.post(
        "/order-lookup",
        response_model=OrderLookupResponse,
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    async def order_lookup(
        payload: Optional[OrderLookupRequest] = Body(None),
        settings: AppSettings = Depends(get_app_settings),
        svc: OrderLookupService = Depends(get_lookup_service),
    ) -> Dict[str, Any]:
        started = time.perf_counter()
        body = payload or OrderLookupRequest()
        try:
            result = await svc.lookup(body.orderCode, body.postcode)
        except LookupServiceError as exc:
            LOOKUPS.labels(_OUTCOMES.get(exc.code, "upstream_error")).inc()
            raise
        finally:
            LOOKUP_LAT.labels(settings.UPSTREAM_PROTOCOL).observe(time.perf_counter() - started)
        LOOKUPS.labels("ok").inc()
        return result


def register_debug(router: APIRouter) -> None:
    @router.get("/debug/origins", response_model=DebugOriginsResponse)
    async def debug_origins(
        settings: AppSettings = Depends(get_app_settings),
    ) -> DebugOriginsResponse:
        return DebugOriginsResponse(
            allowed=settings.allowed_origins,
            shop=settings.SHOP or None,
            version=settings.ADMIN_VERSION,
        )
