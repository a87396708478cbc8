# app/adapters/registry.py
from __future__ import annotations

from typing import Callable, Dict, Optional

import httpx

from app.adapters.admin_transport import AdminApiTransport
from app.adapters.base import OrderSourceAdapter
from app.adapters.shopify_graphql import ShopifyGraphQLAdapter
from app.adapters.shopify_rest import ShopifyRestAdapter
from app.core.config import AppSettings

# UPSTREAM_PROTOCOL -> adapter class
_ADAPTERS: Dict[str, Callable[[AdminApiTransport], OrderSourceAdapter]] = {
    "rest": ShopifyRestAdapter,
    "graphql": ShopifyGraphQLAdapter,
}


def build_adapter(
    settings: AppSettings,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> OrderSourceAdapter:
    key = (settings.UPSTREAM_PROTOCOL or "rest").lower()
    if key not in _ADAPTERS:
        raise ValueError(f"unknown UPSTREAM_PROTOCOL: {settings.UPSTREAM_PROTOCOL!r}")
    return _ADAPTERS[key](AdminApiTransport(settings, transport=transport))
