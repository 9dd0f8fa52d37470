"""Response decoding helpers shared by the resource-call executor.

The PIX API answers with JSON on success and on most failures. These
helpers turn an :class:`httpx.Response` into either the decoded payload or
the provider's :class:`~efipix.models.ErrorDetail`.
"""

from __future__ import annotations

from typing import Any

import httpx

from efipix.exceptions import InvalidResponseError
from efipix.models import ErrorDetail


def extract_response_data(response: httpx.Response) -> Any:
    """Decode the JSON body of a successful response.

    Args:
        response: The :class:`httpx.Response` to decode.

    Returns:
        The decoded JSON value, or ``None`` when the body is empty (as with
        ``204 No Content``). An empty body is never parsed.

    Raises:
        InvalidResponseError: If a non-empty body is not valid JSON.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise InvalidResponseError(
            f"HTTP {response.status_code} response is not valid JSON: {response.text[:200]}"
        ) from exc


def extract_error_detail(response: httpx.Response) -> ErrorDetail:
    """Best-effort decode of the provider diagnostics in a failed response."""
    if not response.content:
        return ErrorDetail()
    try:
        body = response.json()
    except ValueError:
        return ErrorDetail()
    return ErrorDetail.from_body(body)
