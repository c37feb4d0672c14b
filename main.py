"""
Root application entry point for the POS order API wrapper
==========================================================

This module exposes the FastAPI application instance defined in
``pos_order/main.py`` so that deployment tools like Uvicorn can import
``main:app`` directly from the repository root.  The client is built
from ``POS_ORDER_*`` environment variables when the application starts.

Usage
-----

.. code-block:: bash

    POS_ORDER_API_KEY=... POS_ORDER_DEFAULT_TERMINAL_ID=... uvicorn main:app --port 8000
"""

from pos_order.main import app  # noqa: F401 re-export for Uvicorn

__all__ = ["app"]
