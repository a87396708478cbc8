# app/adapters/shopify_rest.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from app.adapters.admin_transport import AdminApiTransport
from app.api.errors import UpstreamError
from app.domain.order_lookup_types import CandidateOrder

logger = logging.getLogger("helphub.upstream")

# Admin REST page limit
PAGE_LIMIT = 250


def _zip(address: Any) -> Optional[str]:
    if isinstance(address, dict):
        return address.get("zip")
    return None


def normalize_rest_order(raw: Dict[str, Any]) -> CandidateOrder:
    line_items = raw.get("line_items") if isinstance(raw.get("line_items"), list) else []
    fulfillments = raw.get("fulfillments") if isinstance(raw.get("fulfillments"), list) else []
    return CandidateOrder(
        id=raw.get("id"),
        name=str(raw.get("name") or ""),
        order_number=raw.get("order_number"),
        shipping_postcode=_zip(raw.get("shipping_address")),
        billing_postcode=_zip(raw.get("billing_address")),
        fulfillments=[f for f in fulfillments if isinstance(f, dict)],
        line_items=[
            {
                "title": li.get("title"),
                "sku": li.get("sku"),
                "product_id": li.get("product_id"),
            }
            for li in line_items
            if isinstance(li, dict)
        ],
    )


def normalize_rest_product(raw: Dict[str, Any]) -> Dict[str, Any]:
    images = raw.get("images") if isinstance(raw.get("images"), list) else []
    image = None
    if images and isinstance(images[0], dict):
        image = images[0].get("src")
    return {"title": raw.get("title"), "handle": raw.get("handle"), "image": image}


class ShopifyRestAdapter:
    """
    Admin REST backend.

    Orders: GET /orders.json?status=any&name=<code> (archived and
    fulfilled orders included). Products: one batched
    GET /products.json?ids=a,b,c for all distinct products on the order.
    """

    item_shape = "line_item"

    def __init__(self, transport: AdminApiTransport):
        self.transport = transport

    async def fetch_orders(self, code: str) -> List[CandidateOrder]:
        data = await self.transport.request(
            "GET",
            "/orders.json",
            params={"status": "any", "name": code, "limit": PAGE_LIMIT},
        )
        orders = data.get("orders")
        if not isinstance(orders, list):
            return []
        return [normalize_rest_order(o) for o in orders if isinstance(o, dict)]

    async def fetch_products(self, product_ids: Sequence[Any]) -> Dict[Any, Dict[str, Any]]:
        ids: List[Any] = []
        for pid in product_ids:
            if pid and pid not in ids:
                ids.append(pid)
        if not ids:
            return {}

        out: Dict[Any, Dict[str, Any]] = {}
        for start in range(0, len(ids), PAGE_LIMIT):
            chunk = ids[start:start + PAGE_LIMIT]
            try:
                data = await self.transport.request(
                    "GET",
                    "/products.json",
                    params={
                        "ids": ",".join(str(i) for i in chunk),
                        "fields": "id,title,handle,images",
                        "limit": PAGE_LIMIT,
                    },
                )
            except UpstreamError as exc:
                # items fall back to line item data
                logger.warning("Could not fetch products %s: %s", chunk, exc.message)
                continue
            for p in data.get("products") or []:
                if isinstance(p, dict) and p.get("id") is not None:
                    out[p["id"]] = normalize_rest_product(p)
        return out
