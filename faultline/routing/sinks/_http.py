"""Shared HTTP helpers for the chat-platform sinks.

Both chat sinks POST a JSON body and classify the response the same way:
transport failures, rate limiting and any other non-2xx status each map
to their own ``DeliveryError``.
"""

from __future__ import annotations

from typing import Any

import httpx

from faultline.errors import RateLimitedError, RejectedError, TransportError

MAX_ERROR_BODY = 500


def post_json(
    client: httpx.Client,
    url: str,
    payload: dict[str, Any],
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, str] | None = None,
) -> httpx.Response:
    """POST *payload* and return the response if it is 2xx.

    Raises
    ------
    TransportError
        The request never produced a response.
    RateLimitedError
        The platform answered 429.
    RejectedError
        Any other non-2xx status.
    """
    try:
        response = client.post(url, json=payload, headers=headers, params=params)
    except httpx.HTTPError as exc:
        raise TransportError(f"{type(exc).__name__}: {exc}") from exc

    if response.is_success:
        return response
    if response.status_code == 429:
        raise RateLimitedError(retry_after=_retry_after(response))
    raise RejectedError(response.status_code, response.text[:MAX_ERROR_BODY])


def _retry_after(response: httpx.Response) -> float | None:
    """Read the retry delay from a 429 body, falling back to the header."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("retry_after"), (int, float)):
        return float(body["retry_after"])

    header = response.headers.get("Retry-After")
    if header is None:
        return None
    try:
        return float(header)
    except ValueError:
        return None
