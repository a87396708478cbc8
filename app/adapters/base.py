# app/adapters/base.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Protocol, Sequence

from app.domain.order_lookup_types import CandidateOrder


class OrderSourceAdapter(Protocol):
    """
    Read-only view of the commerce platform needed by the order lookup.

    Adapters raise app.api.errors.UpstreamError for any transport or API
    failure, except where a method documents otherwise.
    """

    # "line_item": one view per line item, enriched via fetch_products
    # "handle": product data embedded in the order, grouped by handle
    item_shape: Literal["line_item", "handle"]

    async def fetch_orders(self, code: str) -> List[CandidateOrder]:
        """
        Candidate orders for an order code, best match first.
        """
        ...

    async def fetch_products(self, product_ids: Sequence[Any]) -> Dict[Any, Dict[str, Any]]:
        """
        Batched product lookup: {product_id: {"title", "handle", "image"}}.

        Non-fatal: on failure returns what it could load (possibly {}).
        """
        ...
