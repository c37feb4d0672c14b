"""
clients/http_client.py
----------------------

HTTP client wrapper bound to the POS order API. Each instance owns one
pooled ``httpx.Client`` configured with the API base URL, the request
timeout and the default headers produced by
:func:`pos_order.core.auth.build_headers`. Paths passed to :meth:`get`
and :meth:`post` are resolved against the base URL, so
``/v1/pos-order`` on ``https://abs.paylony.com/api`` becomes
``https://abs.paylony.com/api/v1/pos-order``.

Requests are sent exactly once. Non-2xx responses are raised as
``httpx.HTTPStatusError`` so callers handle every failure through the
``httpx.HTTPError`` hierarchy.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
import httpx

from pos_order.core.auth import build_headers


class HTTPClient:
    """Pooled HTTP client for a single base URL and credential.

    Headers are fixed at construction. To use a different API key build
    a new instance; the order client does this on key rotation so that
    requests already in flight keep the headers they were sent with.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 60.0,
        api_key: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.headers: Dict[str, str] = build_headers(api_key)
        self._transport = transport
        # HTTPX Client uses connection pooling
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers=self.headers,
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTPX client and release resources.

        An injected transport belongs to the caller and may be shared by
        rebuilt clients, so it is left open.
        """
        if self._transport is None:
            self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = self._client.request(method, path, **kwargs)
        response.raise_for_status()
        return response

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Perform a GET request relative to the base URL."""
        return self._request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Perform a POST request relative to the base URL."""
        return self._request("POST", path, **kwargs)

    def rebuild(self, api_key: Optional[str]) -> "HTTPClient":
        """Return a new client for the same base URL, timeout and transport."""
        return HTTPClient(
            self.base_url,
            timeout=self.timeout,
            api_key=api_key,
            transport=self._transport,
        )
