# tests/conftest.py
from __future__ import annotations

from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from lookup_fixtures import FakeShopify, make_settings


@pytest.fixture
def fake_shopify() -> FakeShopify:
    return FakeShopify()


@pytest.fixture
def client_factory(fake_shopify: FakeShopify) -> Callable[..., TestClient]:
    def _make(**overrides: Any) -> TestClient:
        app = create_app(make_settings(**overrides), upstream_transport=fake_shopify.transport)
        return TestClient(app)

    return _make


@pytest.fixture
def client(client_factory) -> TestClient:
    return client_factory()
