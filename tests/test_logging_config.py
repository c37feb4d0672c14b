"""Tests for the structured logging helpers."""

import json
import logging
from decimal import Decimal

from pos_order.logging_config import _sanitize, log_context


def test_sanitize_drops_sensitive_keys():
    clean = _sanitize({
        "amount": 10,
        "api_key": "k",
        "Authorization": "Bearer k",
        "nested": {"access_token": "t", "terminal_id": "T0"},
        "items": [{"secret": "s", "ok": 1}],
    })
    assert clean == {"amount": 10, "nested": {"terminal_id": "T0"}, "items": [{"ok": 1}]}


def test_sanitize_stringifies_unknown_objects():
    assert _sanitize({"amount": Decimal("1.50")}) == {"amount": "1.50"}
    assert _sanitize(b"abc") == "<binary 3 bytes>"


def test_log_context_writes_json(caplog):
    caplog.set_level(logging.INFO, logger="pos_order")
    log_context("[POS Order] Creating POS order", {"amount": 5, "api_key": "hidden"})

    record = caplog.records[-1]
    payload = json.loads(record.getMessage())
    assert payload == {
        "event": "pos_order",
        "message": "[POS Order] Creating POS order",
        "context": {"amount": 5},
    }
