"""
Route aggregation package for the POS order API wrapper.

Each module defines an ``APIRouter`` instance that groups related
endpoints together.  The main application imports these routers and
includes them in the global FastAPI instance.
"""

__all__ = ["orders"]

from . import orders  # noqa: E402,F401
