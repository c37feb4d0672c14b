"""Tests for the FastAPI surface in :mod:`pos_order.main`."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from pos_order.main import create_app
from pos_order.services.order_service import OrderClient

API_URL = "https://abs.paylony.com/api"


class Upstream:
    """Stand-in for the POS API that records what it receives."""

    def __init__(self) -> None:
        self.requests = []
        self.reply = {"status_code": 200, "json": {"status": "success"}}
        self.error = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(**self.reply)

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def upstream():
    return Upstream()


@pytest.fixture
def api(upstream):
    order_client = OrderClient(API_URL, "k", "T0", transport=httpx.MockTransport(upstream))
    with TestClient(create_app(order_client=order_client)) as test_client:
        yield test_client


def test_lifespan_stores_client(upstream):
    order_client = OrderClient(API_URL, "k", "T0", transport=httpx.MockTransport(upstream))
    app = create_app(order_client=order_client)
    with TestClient(app):
        assert app.state.order_client is order_client


def test_create_order(api, upstream):
    resp = api.post("/pos-orders", json={"amount": 250, "type": "ussd"})

    assert resp.status_code == 200
    assert resp.json() == {"status": "success"}
    assert str(upstream.requests[-1].url) == f"{API_URL}/v1/pos-order"
    assert upstream.last_json == {
        "amount": 250,
        "type": "ussd",
        "terminal_id": "T0",
        "order_number": "",
        "callback_url": "",
    }


def test_create_order_validation_error(api, upstream):
    resp = api.post("/pos-orders", json={"type": "ussd"})

    assert resp.status_code == 422
    assert resp.json() == {"detail": "The amount field is required."}
    assert upstream.requests == []


def test_create_order_invalid_type(api, upstream):
    resp = api.post("/pos-orders", json={"amount": 1, "type": "cash"})

    assert resp.status_code == 422
    assert "card_purchase, pay_with_phone, ussd" in resp.json()["detail"]
    assert upstream.requests == []


@pytest.mark.parametrize("payment_type", ["card_purchase", "pay_with_phone", "ussd"])
def test_typed_order(api, upstream, payment_type):
    resp = api.post(f"/pos-orders/{payment_type}", json={"amount": 100, "terminal_id": "T7"})

    assert resp.status_code == 200
    assert upstream.last_json["type"] == payment_type
    assert upstream.last_json["terminal_id"] == "T7"


def test_typed_order_unknown_type(api, upstream):
    resp = api.post("/pos-orders/cash", json={"amount": 100})

    assert resp.status_code == 422
    assert upstream.requests == []


def test_retry_order(api, upstream):
    resp = api.get("/pos-orders/123/retry")

    assert resp.status_code == 200
    assert str(upstream.requests[-1].url) == f"{API_URL}/v1/retry-pos-order/123"


def test_order_status(api, upstream):
    assert api.get("/pos-orders/7/status", params={"terminal_id": "T1"}).status_code == 200
    assert str(upstream.requests[-1].url) == f"{API_URL}/v1/pos-order-status/T1/7"

    assert api.get("/pos-orders/7/status").status_code == 200
    assert str(upstream.requests[-1].url) == f"{API_URL}/v1/pos-order-status/T0/7"


def test_upstream_status_is_forwarded(api, upstream):
    upstream.reply = {"status_code": 402, "json": {"error": "declined"}}
    resp = api.post("/pos-orders/card_purchase", json={"amount": 100})

    assert resp.status_code == 402
    body = resp.json()
    assert body["detail"].startswith("Failed to create POS order: ")
    assert body["response"] == {"error": "declined"}


def test_unreachable_upstream_is_bad_gateway(api, upstream):
    upstream.error = httpx.ConnectError("connection refused")
    resp = api.get("/pos-orders/7/retry")

    assert resp.status_code == 502
    assert resp.json() == {
        "detail": "Failed to retry POS order: connection refused",
        "response": None,
    }


def test_payment_types(api):
    resp = api.get("/payment-types")

    assert resp.status_code == 200
    assert resp.json() == {
        "card_purchase": "Card Purchase",
        "pay_with_phone": "Pay with Phone",
        "ussd": "USSD",
    }


def test_order_number(api):
    first = api.get("/order-number", params={"prefix": "INV"}).json()["order_number"]
    second = api.get("/order-number").json()["order_number"]

    assert first.startswith("INV_")
    assert second.startswith("POS_")
    assert first != second


def test_undecodable_success_is_bad_gateway(api, upstream):
    upstream.reply = {"status_code": 200, "text": "<html>ok</html>"}
    resp = api.get("/pos-orders/7/status")

    assert resp.status_code == 502
    assert resp.json()["detail"] == "Failed to get POS order status: Invalid JSON in response body"


def test_create_order_forwards_extra_fields(api, upstream):
    resp = api.post("/pos-orders", json={"amount": 5, "type": "ussd", "narration": "table 4"})

    assert resp.status_code == 200
    assert upstream.last_json["narration"] == "table 4"


def test_order_status_terminal_cannot_leave_status_path(api, upstream):
    resp = api.get("/pos-orders/7/status", params={"terminal_id": "T1/../../retry-pos-order"})

    assert resp.status_code == 200
    assert upstream.requests[-1].url.raw_path.startswith(b"/api/v1/pos-order-status/")
    assert upstream.requests[-1].url.raw_path.endswith(b"/7")
