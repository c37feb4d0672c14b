"""
core/auth.py
-------------

Header construction for authenticated calls to the POS order API.

The upstream service authenticates with a bearer token. Keeping the
header rules in one place means the initial client build and a later
key rotation always produce identical headers.
"""

from __future__ import annotations

from typing import Dict, Optional


def build_headers(api_key: Optional[str] = None) -> Dict[str, str]:
    """Create the default headers sent with every request.

    ``Authorization`` is only added when ``api_key`` is non-empty, so a
    client configured without credentials sends no auth header at all.

    :param api_key: bearer token, may be empty or ``None``
    :return: a dictionary of headers suitable for use with httpx
    """
    headers: Dict[str, str] = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers
