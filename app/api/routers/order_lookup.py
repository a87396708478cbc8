# app/api/routers/order_lookup.py
from __future__ import annotations

from fastapi import APIRouter

from app.api.routers import order_lookup_routes
from app.api.routers.order_lookup_schemas import OrderLookupRequest, OrderLookupResponse

router = APIRouter(tags=["order-lookup"])
debug_router = APIRouter(tags=["debug"])


def _register_all_routes() -> None:
    order_lookup_routes.register(router)
    order_lookup_routes.register_debug(debug_router)


_register_all_routes()

__all__ = [
    "router",
    "debug_router",
    "OrderLookupRequest",
    "OrderLookupResponse",
]
