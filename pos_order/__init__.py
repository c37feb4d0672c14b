"""
pos_order package
-----------------

Client for the POS order API plus a small FastAPI application that
exposes it.  Library users normally only need :class:`OrderClient`
and :class:`PosOrderError`; importing the package also loads
:mod:`main` and exposes the ``app`` instance for ASGI servers.
"""

from .exceptions import PosOrderError, PosOrderValidationError  # noqa: F401
from .services.order_service import OrderClient  # noqa: F401
from .main import app, create_app  # noqa: F401

__all__ = ["OrderClient", "PosOrderError", "PosOrderValidationError", "app", "create_app"]
