# app/metrics.py
from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, Counter, Histogram, generate_latest

# outcome: ok / invalid / not_configured / order_not_found / items_not_found / upstream_error
LOOKUPS = Counter("order_lookups_total", "Order lookups by outcome", ["outcome"])
LOOKUP_LAT = Histogram("order_lookup_seconds", "Order lookup latency (seconds)", ["protocol"])

router = APIRouter(tags=["ops"])


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
