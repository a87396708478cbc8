# app/api/deps.py
from __future__ import annotations

from fastapi import Depends, Request

from app.adapters.base import OrderSourceAdapter
from app.core.config import AppSettings
from app.services.order_lookup_service import OrderLookupService


def get_app_settings(request: Request) -> AppSettings:
    """Settings built at process entry and pinned on app.state."""
    return request.app.state.settings


def get_order_source(request: Request) -> OrderSourceAdapter:
    return request.app.state.order_source


def get_lookup_service(
    settings: AppSettings = Depends(get_app_settings),
    adapter: OrderSourceAdapter = Depends(get_order_source),
) -> OrderLookupService:
    return OrderLookupService(settings, adapter)
