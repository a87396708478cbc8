# app/api/routers/order_lookup_schemas.py
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OrderLookupRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Optional so a missing field is a 400 from the service, not a schema error
    orderCode: Optional[str] = Field(None, description="Customer-facing order code, e.g. LS74193 or #1234")
    postcode: Optional[str] = Field(None, description="Shipping or billing postcode on the order")


class TrackingModel(BaseModel):
    number: Optional[str] = None
    url: Optional[str] = None
    company: Optional[str] = None


class OrderModel(BaseModel):
    id: Any = None
    name: str
    orderNumber: Optional[int] = None
    tracking: List[TrackingModel] = Field(default_factory=list)


class ItemModel(BaseModel):
    title: Optional[str] = None
    handle: Optional[str] = None
    image: Optional[str] = None
    skus: List[str] = Field(default_factory=list)


class OrderLookupResponse(BaseModel):
    ok: bool = True
    order: OrderModel
    items: List[ItemModel]


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str


class DebugOriginsResponse(BaseModel):
    ok: bool = True
    allowed: List[str]
    shop: Optional[str] = None
    version: str
