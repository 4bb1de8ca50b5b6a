from __future__ import annotations

import json
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from ..errors import ParseError, RemoteError


async def forward_json(
    url: str,
    method: str,
    body: Any,
    headers: Optional[Dict[str, str]] = None,
    *,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Any:
    """
    Sends one JSON request and returns the parsed JSON body of a 2xx answer.

    - non-2xx -> RemoteError(status, upstream `message` or raw body)
    - 2xx with a body that is not JSON -> ParseError
    - connection/transport failure -> RemoteError(None, ...)

    Single attempt: no retries.
    """
    req_headers = {"Content-Type": "application/json"}
    if headers:
        req_headers.update(headers)

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            r = await client.request(method, url, json=body, headers=req_headers)
    except httpx.HTTPError as e:
        logger.error(f"Transak request failed: {method} {url}: {e!r}")
        raise RemoteError(None, f"Transak API unreachable: {e}") from e

    try:
        data = r.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        data = None
        if 200 <= r.status_code < 300:
            raise ParseError(f"Invalid JSON response from Transak API: {r.text[:500]}")

    if not 200 <= r.status_code < 300:
        message = None
        if isinstance(data, dict):
            message = data.get("message") or data.get("error")
        if not isinstance(message, str) or not message:
            message = f"HTTP {r.status_code}: {(r.text or '<empty>')[:2000]}"
        logger.error(f"Transak error: {r.status_code} {method} {url}: {message}")
        raise RemoteError(r.status_code, message)

    return data
