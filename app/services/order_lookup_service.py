# app/services/order_lookup_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from app.adapters.base import OrderSourceAdapter
from app.api.errors import (
    GENERIC_SERVER_ERROR,
    ConfigurationError,
    ItemsNotFound,
    LookupServiceError,
    OrderNotFound,
    RequestValidationFailed,
    UpstreamError,
)
from app.core.config import AppSettings
from app.domain.order_lookup_types import CandidateOrder, OrderQuery
from app.services.order_compose import compose
from app.services.order_resolver import normalize_postcode, resolve_order

logger = logging.getLogger("helphub.lookup")


def build_query(order_code: Optional[str], postcode: Optional[str]) -> OrderQuery:
    code = (order_code or "").strip()
    pc = normalize_postcode(postcode)
    if not code or not pc:
        raise RequestValidationFailed("Missing orderCode or postcode")
    return OrderQuery(order_code=code, postcode=pc)


class OrderLookupService:
    """
    Order lookup for the help widget:

      validate -> fetch candidates -> match postcode -> compose -> payload

    Every failure leaves as a LookupServiceError subclass; the HTTP layer
    turns those into {"ok": false, "error": ...}.
    """

    def __init__(self, settings: AppSettings, adapter: OrderSourceAdapter):
        self.settings = settings
        self.adapter = adapter

    async def lookup(self, order_code: Optional[str], postcode: Optional[str]) -> Dict[str, Any]:
        query = build_query(order_code, postcode)

        if not self.settings.is_configured:
            logger.error("lookup refused: SHOP or ADMIN_TOKEN not configured")
            raise ConfigurationError()

        try:
            return await self._lookup(query)
        except UpstreamError as exc:
            logger.error("Order lookup upstream error: %s", exc.message)
            if self.settings.EXPOSE_UPSTREAM_ERRORS:
                raise
            raise LookupServiceError(GENERIC_SERVER_ERROR) from exc

    async def _lookup(self, query: OrderQuery) -> Dict[str, Any]:
        candidates = await self.adapter.fetch_orders(query.order_code)
        order = resolve_order(candidates, query.postcode, mode=self.settings.LOOKUP_MODE)
        if order is None:
            logger.info(
                "order not found: code=%s candidates=%d mode=%s",
                query.order_code,
                len(candidates),
                self.settings.LOOKUP_MODE,
            )
            raise OrderNotFound()

        products: Dict[Any, Dict[str, Any]] = {}
        if self.adapter.item_shape == "line_item":
            products = await self.adapter.fetch_products(
                [li.get("product_id") for li in order.line_items]
            )

        tracking, items = compose(
            order, item_shape=self.adapter.item_shape, products_by_id=products
        )
        if not items:
            logger.info("order %s has no displayable items", order.name)
            raise ItemsNotFound()

        logger.info(
            "order lookup ok: order=%s tracking=%d items=%d",
            order.name,
            len(tracking),
            len(items),
        )
        return self._payload(order, [t.to_dict() for t in tracking], [i.to_dict() for i in items])

    @staticmethod
    def _payload(
        order: CandidateOrder, tracking: List[Dict[str, Any]], items: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        return {
            "ok": True,
            "order": {
                "id": order.id,
                "name": order.name,
                "orderNumber": order.order_number,
                "tracking": tracking,
            },
            "items": items,
        }
