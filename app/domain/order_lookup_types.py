# app/domain/order_lookup_types.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class OrderQuery:
    order_code: str  # trimmed, sent to the upstream search as-is
    postcode: str  # normalized form, only used for comparison


@dataclass
class CandidateOrder:
    id: Any  # REST numeric id or GraphQL gid
    name: str
    order_number: Optional[int] = None
    shipping_postcode: Optional[str] = None  # raw zip from the upstream record
    billing_postcode: Optional[str] = None
    # REST fulfillment vocabulary: tracking_numbers/tracking_urls/tracking_company ...
    fulfillments: List[Dict[str, Any]] = field(default_factory=list)
    # {title, sku, product_id, handle?, product_title?, image?}
    line_items: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class TrackingEntry:
    number: Optional[str]
    url: Optional[str]
    company: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LineItemView:
    title: Optional[str]
    handle: Optional[str]
    image: Optional[str]
    skus: List[str] = field(default_factory=list)  # distinct, first-seen order

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
