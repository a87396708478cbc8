import httpx
import pytest

from lookup_fixtures import rest_order

pytestmark = pytest.mark.grp_http

ORIGIN = "https://www.example.co.uk"


def _one_matching_order(fake_shopify):
    fake_shopify.on(
        "/orders.json",
        {
            "orders": [
                rest_order(
                    fulfillments=[
                        {
                            "tracking_company": "Royal Mail",
                            "tracking_numbers": ["RM123456785GB"],
                            "tracking_urls": ["https://www.royalmail.com/track?RM123456785GB"],
                        }
                    ],
                    line_items=[{"title": "GU10 LED Bulb", "sku": "GU10-5W", "product_id": 7}],
                )
            ]
        },
    )
    fake_shopify.on(
        "/products.json",
        {
            "products": [
                {
                    "id": 7,
                    "title": "GU10 LED Bulb 5W",
                    "handle": "gu10-led-bulb",
                    "images": [{"src": "https://cdn.shopify.com/gu10.jpg"}],
                }
            ]
        },
    )


def test_liveness(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_lookup_end_to_end(client, fake_shopify):
    _one_matching_order(fake_shopify)

    r = client.post(
        "/order-lookup",
        json={"orderCode": "LS74193", "postcode": "SW1A 1AA"},
        headers={"Origin": ORIGIN},
    )

    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == ORIGIN
    assert r.json() == {
        "ok": True,
        "order": {
            "id": 5551001,
            "name": "LS74193",
            "orderNumber": 74193,
            "tracking": [
                {
                    "number": "RM123456785GB",
                    "url": "https://www.royalmail.com/track?RM123456785GB",
                    "company": "Royal Mail",
                }
            ],
        },
        "items": [
            {
                "title": "GU10 LED Bulb 5W",
                "handle": "gu10-led-bulb",
                "image": "https://cdn.shopify.com/gu10.jpg",
                "skus": ["GU10-5W"],
            }
        ],
    }
    assert [p.rsplit("/", 1)[-1] for p in fake_shopify.paths()] == ["orders.json", "products.json"]


def test_missing_postcode_is_400_without_upstream_call(client, fake_shopify):
    r = client.post("/order-lookup", json={"orderCode": "LS74193"})

    assert r.status_code == 400
    body = r.json()
    assert body["ok"] is False
    assert body["error"]
    assert fake_shopify.calls == []


def test_empty_body_is_400(client, fake_shopify):
    r = client.post("/order-lookup")
    assert r.status_code == 400
    assert r.json()["ok"] is False
    assert fake_shopify.calls == []


def test_malformed_json_is_400_json(client):
    r = client.post(
        "/order-lookup", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert r.status_code == 400
    assert r.json() == {"ok": False, "error": "Invalid request body"}


def test_unconfigured_server_is_500(client_factory, fake_shopify):
    r = client_factory(ADMIN_TOKEN="").post(
        "/order-lookup", json={"orderCode": "LS74193", "postcode": "SW1A 1AA"}
    )
    assert r.status_code == 500
    assert r.json() == {"ok": False, "error": "Server not configured"}
    assert fake_shopify.calls == []


def test_no_candidates_is_404(client, fake_shopify):
    fake_shopify.on("/orders.json", {"orders": []})
    r = client.post("/order-lookup", json={"orderCode": "LS00000", "postcode": "SW1A 1AA"})
    assert r.status_code == 404
    assert r.json() == {"ok": False, "error": "Order not found"}


def test_postcode_mismatch_is_404_in_strict_mode(client, fake_shopify):
    _one_matching_order(fake_shopify)
    r = client.post("/order-lookup", json={"orderCode": "LS74193", "postcode": "EC1V 9HX"})
    assert r.status_code == 404
    assert r.json()["error"] == "Order not found"


def test_postcode_mismatch_found_in_lenient_mode(client_factory, fake_shopify):
    _one_matching_order(fake_shopify)
    r = client_factory(LOOKUP_MODE="lenient").post(
        "/order-lookup", json={"orderCode": "LS74193", "postcode": "EC1V 9HX"}
    )
    assert r.status_code == 200
    assert r.json()["order"]["name"] == "LS74193"


def test_order_without_items_is_404_items(client, fake_shopify):
    fake_shopify.on("/orders.json", {"orders": [rest_order(line_items=[])]})
    r = client.post("/order-lookup", json={"orderCode": "LS74193", "postcode": "sw1a1aa"})
    assert r.status_code == 404
    assert r.json() == {"ok": False, "error": "No products found on that order"}


def test_product_fetch_failure_degrades_items(client, fake_shopify):
    fake_shopify.on(
        "/orders.json",
        {"orders": [rest_order(line_items=[{"title": "Bulb", "sku": "B1", "product_id": 7}])]},
    )
    fake_shopify.on("/products.json", lambda req: httpx.Response(503))

    r = client.post("/order-lookup", json={"orderCode": "LS74193", "postcode": "SW1A 1AA"})

    assert r.status_code == 200
    assert r.json()["items"] == [{"title": "Bulb", "handle": None, "image": None, "skus": ["B1"]}]


def test_upstream_failure_is_generic_500(client, fake_shopify):
    fake_shopify.on("/orders.json", lambda req: httpx.Response(401, json={"errors": "Invalid API key"}))
    r = client.post("/order-lookup", json={"orderCode": "LS74193", "postcode": "SW1A 1AA"})
    assert r.status_code == 500
    assert r.json() == {"ok": False, "error": "Server error"}


def test_upstream_failure_message_forwarded_when_enabled(client_factory, fake_shopify):
    fake_shopify.on("/orders.json", lambda req: httpx.Response(401, json={"errors": "Invalid API key"}))
    r = client_factory(EXPOSE_UPSTREAM_ERRORS=True).post(
        "/order-lookup", json={"orderCode": "LS74193", "postcode": "SW1A 1AA"}
    )
    assert r.status_code == 500
    body = r.json()
    assert body["ok"] is False
    assert "Invalid API key" in body["error"]
    assert "shpat_test_token" not in body["error"]


def test_graphql_lookup_groups_items_by_handle(client_factory, fake_shopify):
    node = {
        "id": "gid://shopify/Order/42",
        "legacyResourceId": "42",
        "name": "#1001",
        "shippingAddress": {"zip": "SW1A 1AA"},
        "billingAddress": {"zip": "SW1A 1AA"},
        "fulfillments": [{"trackingInfo": [{"number": None, "url": "https://track/x", "company": "DPD"}]}],
        "lineItems": {
            "edges": [
                {"node": {"title": "1m", "sku": "S-1", "variant": {"sku": "S-1", "product": {"title": "Strip", "handle": "strip", "featuredImage": None}}}},
                {"node": {"title": "5m", "sku": "S-5", "variant": {"sku": "S-5", "product": {"title": "Strip", "handle": "strip", "featuredImage": None}}}},
            ]
        },
    }
    fake_shopify.on("/graphql.json", {"data": {"orders": {"edges": [{"node": node}]}}})

    r = client_factory(UPSTREAM_PROTOCOL="graphql").post(
        "/order-lookup", json={"orderCode": "#1001", "postcode": "SW1A 1AA"}
    )

    assert r.status_code == 200
    body = r.json()
    assert body["order"]["id"] == 42
    assert body["order"]["tracking"] == [{"number": None, "url": "https://track/x", "company": "DPD"}]
    assert body["items"] == [{"title": "Strip", "handle": "strip", "image": "", "skus": ["S-1", "S-5"]}]
    assert len(fake_shopify.calls) == 1


def test_debug_origins(client):
    r = client.get("/debug/origins")
    assert r.status_code == 200
    assert r.json() == {
        "ok": True,
        "allowed": ["https://www.example.co.uk", "https://example.co.uk"],
        "shop": "test-shop.myshopify.com",
        "version": "2024-10",
    }


def test_debug_origins_can_be_switched_off(client_factory):
    r = client_factory(DEBUG_ROUTES=False).get("/debug/origins")
    assert r.status_code == 404
    assert r.json()["ok"] is False


def test_metrics_count_lookups(client, fake_shopify):
    _one_matching_order(fake_shopify)
    client.post("/order-lookup", json={"orderCode": "LS74193", "postcode": "SW1A 1AA"})

    r = client.get("/metrics")

    assert r.status_code == 200
    assert 'order_lookups_total{outcome="ok"}' in r.text
