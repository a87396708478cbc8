# app/adapters/shopify_graphql.py
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Sequence

from app.adapters.admin_transport import AdminApiTransport
from app.api.errors import UpstreamError
from app.domain.order_lookup_types import CandidateOrder

MAX_CANDIDATES = 5

ORDER_LOOKUP_QUERY = """
query OrderLookup($query: String!, $first: Int!) {
  orders(first: $first, query: $query, sortKey: CREATED_AT, reverse: true) {
    edges {
      node {
        id
        legacyResourceId
        name
        shippingAddress { zip }
        billingAddress { zip }
        fulfillments(first: 20) {
          trackingInfo { number url company }
        }
        lineItems(first: 100) {
          edges {
            node {
              title
              sku
              variant {
                sku
                product {
                  title
                  handle
                  featuredImage { url }
                }
              }
            }
          }
        }
      }
    }
  }
}
"""


def _quote(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_order_search(code: str) -> str:
    """
    Search string for orders(query:).

      "LS74193" -> name:"LS74193" OR name:"#LS74193" OR order_number:74193
      "#1001"   -> name:"1001" OR name:"#1001" OR order_number:1001
    """
    bare = (code or "").strip().lstrip("#").strip()
    terms = [f"name:{_quote(bare)}", f"name:{_quote('#' + bare)}"]
    digits = re.sub(r"\D", "", bare)
    if digits:
        terms.append(f"order_number:{digits}")
    return " OR ".join(terms)


def _edges(conn: Any) -> List[Dict[str, Any]]:
    if not isinstance(conn, dict):
        return []
    return [e["node"] for e in conn.get("edges") or [] if isinstance(e, dict) and e.get("node")]


def _zip(address: Any) -> Optional[str]:
    if isinstance(address, dict):
        return address.get("zip")
    return None


def _fulfillment_to_rest(f: Dict[str, Any]) -> Dict[str, Any]:
    infos = [t for t in f.get("trackingInfo") or [] if isinstance(t, dict)]
    company = next((t.get("company") for t in infos if t.get("company")), None)
    return {
        "tracking_numbers": [t.get("number") for t in infos],
        "tracking_urls": [t.get("url") for t in infos],
        "tracking_companies": [t.get("company") for t in infos],
        "tracking_company": company,
    }


def _line_item(node: Dict[str, Any]) -> Dict[str, Any]:
    variant = node.get("variant") or {}
    product = variant.get("product") or {}
    image = product.get("featuredImage") or {}
    return {
        "title": node.get("title"),
        "sku": variant.get("sku") or node.get("sku"),
        "handle": product.get("handle"),
        "product_title": product.get("title"),
        "image": image.get("url"),
    }


def normalize_graphql_order(node: Dict[str, Any]) -> CandidateOrder:
    legacy_id = node.get("legacyResourceId")
    fulfillments = node.get("fulfillments")
    return CandidateOrder(
        id=int(legacy_id) if legacy_id and str(legacy_id).isdigit() else node.get("id"),
        name=str(node.get("name") or ""),
        order_number=None,
        shipping_postcode=_zip(node.get("shippingAddress")),
        billing_postcode=_zip(node.get("billingAddress")),
        fulfillments=[
            _fulfillment_to_rest(f) for f in fulfillments or [] if isinstance(f, dict)
        ],
        line_items=[_line_item(n) for n in _edges(node.get("lineItems"))],
    )


def _error_message(errors: Any) -> str:
    if isinstance(errors, list):
        msgs = [str(e.get("message")) if isinstance(e, dict) else str(e) for e in errors]
        return "; ".join(m for m in msgs if m) or "unknown error"
    return str(errors)


class ShopifyGraphQLAdapter:
    """
    Admin GraphQL backend: one query per lookup, products embedded.
    """

    item_shape = "handle"

    def __init__(self, transport: AdminApiTransport):
        self.transport = transport

    async def fetch_orders(self, code: str) -> List[CandidateOrder]:
        data = await self.transport.request(
            "POST",
            "/graphql.json",
            json_body={
                "query": ORDER_LOOKUP_QUERY,
                "variables": {"query": build_order_search(code), "first": MAX_CANDIDATES},
            },
        )
        if data.get("errors"):
            raise UpstreamError(f"Shopify GraphQL error: {_error_message(data['errors'])}")

        orders = (data.get("data") or {}).get("orders")
        return [normalize_graphql_order(n) for n in _edges(orders)]

    async def fetch_products(self, product_ids: Sequence[Any]) -> Dict[Any, Dict[str, Any]]:
        return {}
