"""
logging_config.py
------------------

This module defines a shared logging configuration and utilities for
structured logging throughout the POS order client.  It uses Python's
built‑in ``logging`` module rather than ``print`` so that log output
can be captured by standard logging handlers or external systems.
Messages are serialised as JSON to make them easier to parse
downstream.

``log_context`` is the default sink handed to
:class:`pos_order.services.order_service.OrderClient`.  Any callable
accepting ``(message, context)`` can replace it.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, Mapping, Optional

# -----------------------------------------------------------------------------
# Configure global logging
# -----------------------------------------------------------------------------

# Set up the root logger once.  Log output goes to stdout with a
# timestamp, level and the raw message, which is itself a JSON string.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger("pos_order")

_SENSITIVE_KEYS = ("token", "password", "secret", "api_key", "authorization")


def _sanitize(obj: Any) -> Any:
    """Recursively sanitise objects for logging.

    Dictionaries will have keys containing 'token', 'password',
    'secret', 'api_key' or 'authorization' removed.  Lists and tuples
    are processed element‑wise.  Anything that is not JSON serialisable
    (``Decimal`` amounts, for instance) is rendered with ``str``.

    Parameters
    ----------
    obj : Any
        Arbitrary Python object to sanitise.

    Returns
    -------
    Any
        A sanitised representation of the input suitable for JSON serialisation.
    """
    if isinstance(obj, (bytes, bytearray)):
        return f"<binary {len(obj)} bytes>"
    if isinstance(obj, Mapping):
        clean: Dict[str, Any] = {}
        for k, v in obj.items():
            if any(keyword in str(k).lower() for keyword in _SENSITIVE_KEYS):
                continue
            clean[str(k)] = _sanitize(v)
        return clean
    if isinstance(obj, (list, tuple)):
        return [_sanitize(i) for i in obj]
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    return str(obj)


def log_context(message: str, context: Optional[Mapping[str, Any]] = None) -> None:
    """Write a structured ``(message, context)`` pair at INFO level."""
    logger.info(json.dumps({
        "event": "pos_order",
        "message": message,
        "context": _sanitize(context or {}),
    }))
