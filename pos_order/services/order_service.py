"""
services/order_service.py
-------------------------

Client for the POS order lifecycle: create an order, retry it and look
up its status.  Inputs are validated locally before anything is sent,
and every transport or API failure is converted into a single
:class:`~pos_order.exceptions.PosOrderError`.

Responses are returned exactly as the API decoded them; no schema is
imposed on the upstream reply.

One :class:`OrderClient` is built from settings at startup and shared.
Calls are safe from several threads.  ``set_api_key`` and
``set_terminal_id`` mutate the shared instance and need external
synchronisation; ``with_api_key`` and ``with_terminal_id`` return an
independent copy instead.
"""

from __future__ import annotations

import itertools
import json
import time
import uuid
from decimal import Decimal
from typing import Any, Callable, Dict, Mapping, Optional, Union
from urllib.parse import quote

import httpx

from pos_order.clients.http_client import HTTPClient
from pos_order.core.config import DEFAULT_API_URL, DEFAULT_PAYMENT_TYPES, Settings
from pos_order.exceptions import PosOrderError, PosOrderValidationError
from pos_order.logging_config import log_context

TYPE_CARD_PURCHASE = "card_purchase"
TYPE_PAY_WITH_PHONE = "pay_with_phone"
TYPE_USSD = "ussd"

VALID_TYPES = (TYPE_CARD_PURCHASE, TYPE_PAY_WITH_PHONE, TYPE_USSD)

LOG_PREFIX = "[POS Order] "

LogSink = Callable[[str, Mapping[str, Any]], None]
OrderId = Union[str, int]

_sequence = itertools.count(1)


def _blank(value: Any) -> bool:
    # None, "", 0, 0.0, False, empty containers and the string "0"
    return not value or value == "0"


def _encode_payload(payload: Mapping[str, Any]) -> str:
    """Serialise an order body, writing ``Decimal`` values as exact JSON numbers.

    Each ``Decimal`` is first emitted as a unique placeholder string which
    is then swapped for the decimal text, so ``Decimal("1234567890.10")``
    is sent digit for digit instead of through ``float``.

    :raises ValueError: for NaN or infinite numbers
    :raises TypeError: for values JSON cannot represent
    """
    numbers: Dict[str, str] = {}

    def default(obj: Any) -> Any:
        if isinstance(obj, Decimal):
            if not obj.is_finite():
                raise ValueError(f"Out of range decimal values are not JSON compliant: {obj}")
            marker = f"__decimal_{uuid.uuid4().hex}__"
            numbers[marker] = str(obj)
            return marker
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

    body = json.dumps(payload, default=default, allow_nan=False)
    for marker, text in numbers.items():
        body = body.replace(f'"{marker}"', text)
    return body


def _segment(value: Any) -> str:
    # one percent-encoded path segment; "." and ".." would be collapsed by httpx
    quoted = quote(str(value), safe="")
    if quoted in (".", ".."):
        quoted = quoted.replace(".", "%2E")
    return quoted


class OrderClient:
    """Synchronous client for the POS order API.

    :param base_url: API root, e.g. ``https://abs.paylony.com/api``
    :param api_key: bearer token; no ``Authorization`` header when empty
    :param terminal_id: default terminal used when a call omits one
    :param timeout: request timeout in seconds
    :param logging: send payloads and results to ``log_sink``
    :param payment_types: override for :meth:`get_payment_types`
    :param log_sink: callable taking ``(message, context)``
    :param transport: httpx transport, mainly for tests
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        api_key: Optional[str] = "",
        terminal_id: Optional[str] = "",
        *,
        timeout: float = 60.0,
        logging: bool = False,
        payment_types: Optional[Mapping[str, str]] = None,
        log_sink: Optional[LogSink] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = base_url
        self._api_key = api_key
        self._terminal_id = terminal_id
        self._timeout = timeout
        self._logging = logging
        self._payment_types = dict(payment_types) if payment_types is not None else None
        self._log_sink: LogSink = log_sink or log_context
        self._transport = transport
        self._http = HTTPClient(base_url, timeout=timeout, api_key=api_key, transport=transport)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        log_sink: Optional[LogSink] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "OrderClient":
        """Build a client from :class:`~pos_order.core.config.Settings`.

        The ``retry_*`` settings are not used.
        """
        return cls(
            settings.api_url,
            settings.api_key,
            settings.default_terminal_id,
            timeout=settings.timeout,
            logging=settings.logging,
            payment_types=settings.payment_types,
            log_sink=log_sink,
            transport=transport,
        )

    # ------------------------------------------------------------------
    # read-only configuration
    # ------------------------------------------------------------------
    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def logging_enabled(self) -> bool:
        return self._logging

    def __repr__(self) -> str:
        return f"OrderClient(base_url={self._base_url!r}, terminal_id={self._terminal_id!r})"

    # ------------------------------------------------------------------
    # order lifecycle
    # ------------------------------------------------------------------
    def create_order(self, data: Mapping[str, Any]) -> Any:
        """Create a POS order.

        ``data`` needs ``amount`` and ``type``; ``terminal_id`` falls back
        to the default terminal, ``order_number`` and ``callback_url`` to
        empty strings.  Any other keys are sent as given.

        :raises PosOrderError: on invalid input or any failed request
        :return: decoded JSON response
        """
        payload: Dict[str, Any] = dict(data)

        if _blank(payload.get("amount")):
            raise PosOrderValidationError("The amount field is required.")

        if _blank(payload.get("type")):
            raise PosOrderValidationError("The type field is required.")

        if payload["type"] not in VALID_TYPES:
            raise PosOrderValidationError(
                "Invalid payment type. Must be one of: " + ", ".join(VALID_TYPES)
            )

        if _blank(payload.get("terminal_id")):
            if _blank(self._terminal_id):
                raise PosOrderValidationError(
                    "Terminal ID is required. Set it in the request or configure a default terminal ID."
                )
            payload["terminal_id"] = self._terminal_id

        if payload.get("order_number") is None:
            payload["order_number"] = ""
        if payload.get("callback_url") is None:
            payload["callback_url"] = ""

        try:
            body = _encode_payload(payload)
        except (TypeError, ValueError) as exc:
            raise PosOrderValidationError(f"Invalid order payload: {exc}") from exc

        self._log("Creating POS order", payload)
        result = self._send(
            "create POS order",
            "Error creating POS order",
            {},
            "POST",
            "/v1/pos-order",
            content=body,
        )
        self._log("POS order created", result)
        return result

    def retry_order(self, order_id: Optional[OrderId]) -> Any:
        """Ask the API to retry an existing order."""
        if _blank(order_id):
            raise PosOrderValidationError("Order ID is required.")

        self._log("Retrying POS order", {"order_id": order_id})
        result = self._send(
            "retry POS order",
            "Error retrying POS order",
            {"order_id": order_id},
            "GET",
            f"/v1/retry-pos-order/{_segment(order_id)}",
        )
        self._log("POS order retry initiated", result)
        return result

    def get_order_status(self, order_id: Optional[OrderId], terminal_id: Optional[str] = None) -> Any:
        """Fetch the status of an order on a terminal.

        ``terminal_id`` defaults to the configured terminal.
        """
        if _blank(order_id):
            raise PosOrderValidationError("Order ID is required.")

        if _blank(terminal_id):
            if _blank(self._terminal_id):
                raise PosOrderValidationError(
                    "Terminal ID is required. Provide it or configure a default terminal ID."
                )
            terminal_id = self._terminal_id

        context = {"order_id": order_id, "terminal_id": terminal_id}
        self._log("Checking POS order status", context)
        result = self._send(
            "get POS order status",
            "Error checking POS order status",
            context,
            "GET",
            f"/v1/pos-order-status/{_segment(terminal_id)}/{_segment(order_id)}",
        )
        self._log("POS order status retrieved", result)
        return result

    # ------------------------------------------------------------------
    # typed shortcuts
    # ------------------------------------------------------------------
    def card_purchase(
        self,
        amount: Any,
        terminal_id: Optional[str] = None,
        order_number: Optional[str] = None,
        callback_url: Optional[str] = None,
    ) -> Any:
        return self._typed_order(TYPE_CARD_PURCHASE, amount, terminal_id, order_number, callback_url)

    def pay_with_phone(
        self,
        amount: Any,
        terminal_id: Optional[str] = None,
        order_number: Optional[str] = None,
        callback_url: Optional[str] = None,
    ) -> Any:
        return self._typed_order(TYPE_PAY_WITH_PHONE, amount, terminal_id, order_number, callback_url)

    def ussd_payment(
        self,
        amount: Any,
        terminal_id: Optional[str] = None,
        order_number: Optional[str] = None,
        callback_url: Optional[str] = None,
    ) -> Any:
        return self._typed_order(TYPE_USSD, amount, terminal_id, order_number, callback_url)

    def _typed_order(
        self,
        payment_type: str,
        amount: Any,
        terminal_id: Optional[str],
        order_number: Optional[str],
        callback_url: Optional[str],
    ) -> Any:
        return self.create_order({
            "amount": amount,
            "type": payment_type,
            "terminal_id": terminal_id if terminal_id is not None else self._terminal_id,
            "order_number": order_number if order_number is not None else "",
            "callback_url": callback_url if callback_url is not None else "",
        })

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    @staticmethod
    def generate_order_number(prefix: str = "POS") -> str:
        """Return ``{prefix}_{unix seconds}_{token}``, unique within the process."""
        token = f"{next(_sequence):x}{uuid.uuid4().hex[:8]}"
        return f"{prefix}_{int(time.time())}_{token}"

    def get_payment_types(self) -> Dict[str, str]:
        if self._payment_types is not None:
            return dict(self._payment_types)
        return dict(DEFAULT_PAYMENT_TYPES)

    # ------------------------------------------------------------------
    # credentials
    # ------------------------------------------------------------------
    def set_api_key(self, api_key: Optional[str]) -> "OrderClient":
        """Replace the API key and rebuild the transport headers.

        Useful for multi-tenant applications.  Not thread-safe; see
        :meth:`with_api_key`.
        """
        old = self._http
        self._api_key = api_key
        self._http = old.rebuild(api_key)
        old.close()
        return self

    def set_terminal_id(self, terminal_id: Optional[str]) -> "OrderClient":
        self._terminal_id = terminal_id
        return self

    def get_api_key(self) -> Optional[str]:
        return self._api_key

    def get_terminal_id(self) -> Optional[str]:
        return self._terminal_id

    def with_api_key(self, api_key: Optional[str]) -> "OrderClient":
        """Return a new client using ``api_key``; this one is unchanged."""
        return self._derive(api_key=api_key)

    def with_terminal_id(self, terminal_id: Optional[str]) -> "OrderClient":
        """Return a new client defaulting to ``terminal_id``; this one is unchanged."""
        return self._derive(terminal_id=terminal_id)

    def _derive(self, **overrides: Any) -> "OrderClient":
        fields: Dict[str, Any] = {
            "api_key": self._api_key,
            "terminal_id": self._terminal_id,
        }
        fields.update(overrides)
        return OrderClient(
            self._base_url,
            fields["api_key"],
            fields["terminal_id"],
            timeout=self._timeout,
            logging=self._logging,
            payment_types=self._payment_types,
            log_sink=self._log_sink,
            transport=self._transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "OrderClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------
    def _log(self, message: str, context: Any = None) -> None:
        if not self._logging:
            return
        if not isinstance(context, Mapping):
            context = {"result": context}
        self._log_sink(LOG_PREFIX + message, context)

    def _send(
        self,
        operation: str,
        error_message: str,
        error_context: Mapping[str, Any],
        method: str,
        path: str,
        **kwargs: Any,
    ) -> Any:
        try:
            response = self._http.get(path, **kwargs) if method == "GET" else self._http.post(path, **kwargs)
        except httpx.HTTPError as exc:
            code = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else 0
            self._log(error_message, {**error_context, "error": str(exc), "code": code})
            raise self._translate(operation, exc, code) from exc

        try:
            return response.json()
        except ValueError as exc:
            self._log(error_message, {**error_context, "error": "Invalid JSON in response body", "code": 0})
            raise PosOrderError(
                f"Failed to {operation}: Invalid JSON in response body",
                0,
                None,
                response.status_code,
                response.text,
            ) from exc

    @staticmethod
    def _translate(operation: str, exc: httpx.HTTPError, code: int) -> PosOrderError:
        body: Any = None
        raw_body: Optional[str] = None
        status_code: Optional[int] = None
        if isinstance(exc, httpx.HTTPStatusError):
            status_code = exc.response.status_code
            try:
                body = exc.response.json()
            except ValueError:
                raw_body = exc.response.text or None
        return PosOrderError(f"Failed to {operation}: {exc}", code, body, status_code, raw_body)
