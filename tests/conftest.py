"""Shared fixtures for the POS order client tests.

Upstream calls never leave the process: service tests patch httpx with
``respx`` and route tests inject an ``httpx.MockTransport``.
"""

from typing import Any, Dict, List, Mapping, Tuple

import pytest

from pos_order.services.order_service import OrderClient

API_URL = "https://abs.paylony.com/api"


class RecordingSink:
    """Log sink that keeps every ``(message, context)`` pair."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def __call__(self, message: str, context: Mapping[str, Any]) -> None:
        self.calls.append((message, dict(context)))

    @property
    def messages(self) -> List[str]:
        return [message for message, _ in self.calls]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def client(sink: RecordingSink):
    order_client = OrderClient(API_URL, "secret-key", "T0", timeout=5, logging=True, log_sink=sink)
    yield order_client
    order_client.close()


@pytest.fixture
def bare_client():
    """Client without a default terminal or API key."""
    order_client = OrderClient(API_URL, "", "", timeout=5)
    yield order_client
    order_client.close()
