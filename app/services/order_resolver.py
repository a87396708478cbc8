# app/services/order_resolver.py
from __future__ import annotations

import re
from typing import Any, Literal, Optional, Sequence

from app.domain.order_lookup_types import CandidateOrder

LookupMode = Literal["strict", "lenient"]

_WS = re.compile(r"\s+")


def normalize_postcode(raw: Any) -> str:
    """
    Comparison form of a postcode: uppercased, all whitespace removed.

      "sw1a 1aa" -> "SW1A1AA"
    """
    if raw is None:
        return ""
    return _WS.sub("", str(raw)).upper()


def postcode_matches(order: CandidateOrder, target: str) -> bool:
    """Shipping postcode first, then billing. Empty postcodes never match."""
    if not target:
        return False
    ship = normalize_postcode(order.shipping_postcode)
    if ship and ship == target:
        return True
    bill = normalize_postcode(order.billing_postcode)
    return bool(bill) and bill == target


def resolve_order(
    orders: Sequence[CandidateOrder],
    target_postcode: str,
    *,
    mode: LookupMode = "strict",
) -> Optional[CandidateOrder]:
    """
    Pick the order to disclose.

    Candidates are walked in upstream order (relevance / recency); the first
    whose shipping or billing postcode matches wins.

    No match:
      - strict: None
      - lenient: first candidate (order code alone is accepted)

    An empty candidate list is None in both modes.
    """
    if not orders:
        return None

    target = normalize_postcode(target_postcode)
    for order in orders:
        if postcode_matches(order, target):
            return order

    if mode == "lenient":
        return orders[0]
    return None
