"""
exceptions.py
-------------

The single error type raised by the POS order client.

Every failed call surfaces as :class:`PosOrderError`.  Local input
validation raises the :class:`PosOrderValidationError` subclass so a
host can tell a rejected request apart from an upstream failure without
parsing messages.
"""

from __future__ import annotations

from typing import Any, Optional


class PosOrderError(Exception):
    """Raised when a POS order operation fails.

    :param message: human readable description, prefixed with the failing operation
    :param code: numeric code of the underlying transport failure, ``0`` if none
    :param response: decoded JSON body of the failing response, if any
    :param status_code: HTTP status of the failing response, if any
    :param raw_body: response text that could not be decoded as JSON
    """

    def __init__(
        self,
        message: str = "",
        code: int = 0,
        response: Any = None,
        status_code: Optional[int] = None,
        raw_body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.response = response
        self.status_code = status_code
        self.raw_body = raw_body

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.message!r}, code={self.code!r}, "
            f"status_code={self.status_code!r})"
        )


class PosOrderValidationError(PosOrderError):
    """Raised before any request is sent when the input is invalid."""
