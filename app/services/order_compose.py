# app/services/order_compose.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Tuple

from app.domain.order_lookup_types import CandidateOrder, LineItemView, TrackingEntry

ItemShape = Literal["line_item", "handle"]


def _positional(value: Any, legacy: Any) -> List[Optional[str]]:
    """List field if non-empty, else the single legacy field. Positions are kept."""
    if isinstance(value, (list, tuple)) and value:
        return [str(v) if v else None for v in value]
    if legacy:
        return [str(legacy)]
    return []


def build_tracking(fulfillments: Sequence[Mapping[str, Any]]) -> List[TrackingEntry]:
    """
    Flatten fulfillments into tracking entries.

    numbers: tracking_numbers, else [tracking_number]
    urls:    tracking_urls, else [tracking_url]
    Each number takes the url at its position, else the first url, else None.
    Carrier: tracking_companies at the same position, else tracking_company,
    else shipping_company.
    A fulfillment with only a url yields one entry with number=None;
    one with neither is skipped.
    """
    out: List[TrackingEntry] = []
    for f in fulfillments or []:
        if not isinstance(f, Mapping):
            continue
        company = f.get("tracking_company") or f.get("shipping_company") or None
        companies = f.get("tracking_companies") if isinstance(f.get("tracking_companies"), list) else []

        numbers = _positional(f.get("tracking_numbers"), f.get("tracking_number"))
        urls = _positional(f.get("tracking_urls"), f.get("tracking_url"))
        first_url = urls[0] if urls else None

        if any(numbers):
            for idx, num in enumerate(numbers):
                if not num:
                    continue
                url = (urls[idx] if idx < len(urls) else None) or first_url
                carrier = (companies[idx] if idx < len(companies) else None) or company
                out.append(TrackingEntry(number=num, url=url, company=carrier))
        else:
            url = next((u for u in urls if u), None)
            if url:
                out.append(TrackingEntry(number=None, url=url, company=company))
    return out


def build_items_per_line(
    line_items: Sequence[Mapping[str, Any]],
    products_by_id: Mapping[Any, Mapping[str, Any]],
) -> List[LineItemView]:
    """One view per line item, enriched from its product when it was loaded."""
    views: List[LineItemView] = []
    for li in line_items or []:
        pid = li.get("product_id")
        product = products_by_id.get(pid) if pid else None
        sku = li.get("sku")
        if product:
            views.append(
                LineItemView(
                    title=product.get("title") or li.get("title"),
                    handle=product.get("handle"),
                    image=product.get("image"),
                    skus=[str(sku)] if sku else [],
                )
            )
        else:
            views.append(
                LineItemView(
                    title=li.get("title"),
                    handle=None,
                    image=None,
                    skus=[str(sku)] if sku else [],
                )
            )
    return views


def build_items_by_handle(line_items: Sequence[Mapping[str, Any]]) -> List[LineItemView]:
    """
    Group line items by product handle, first-seen order.

    Items without a handle are dropped. SKUs accumulate as a distinct list.
    Title: product title, then line item title, then the handle.
    Image: product image url, or "".
    """
    groups: Dict[str, LineItemView] = {}
    for li in line_items or []:
        handle = li.get("handle")
        if not handle:
            continue
        view = groups.get(handle)
        if view is None:
            view = LineItemView(
                title=li.get("product_title") or li.get("title") or handle,
                handle=handle,
                image=li.get("image") or "",
                skus=[],
            )
            groups[handle] = view
        sku = li.get("sku")
        if sku and str(sku) not in view.skus:
            view.skus.append(str(sku))
    return list(groups.values())


def compose(
    order: CandidateOrder,
    *,
    item_shape: ItemShape = "line_item",
    products_by_id: Optional[Mapping[Any, Mapping[str, Any]]] = None,
) -> Tuple[List[TrackingEntry], List[LineItemView]]:
    tracking = build_tracking(order.fulfillments)
    if item_shape == "handle":
        items = build_items_by_handle(order.line_items)
    else:
        items = build_items_per_line(order.line_items, products_by_id or {})
    return tracking, items
