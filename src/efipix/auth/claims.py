"""Local decoding of access-token claims.

.. warning::

   :func:`decode_claims` does **not** verify the token signature. It only
   reads the ``exp`` claim so that the session can skip a network round trip
   while a cached token is still valid. Trust in the token's authenticity
   rests entirely on the mutually-authenticated TLS channel it was received
   over and on the issuing provider. Never use the decoded claims to make
   an authorization decision; the provider validates the token on every
   request.

A token is three dot-separated segments (``header.payload.signature``).
Only the payload is read: it is unpadded URL-safe base64 of a JSON object.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any

from efipix.exceptions import MalformedTokenError, TokenEncodingError, TokenPayloadError


def decode_claims(token: str) -> dict[str, Any]:
    """Decode the claims of *token* without verifying its signature.

    Args:
        token: The raw access-token value.

    Returns:
        The payload as a dict.

    Raises:
        MalformedTokenError: If the token does not have exactly 3 segments.
        TokenEncodingError: If the payload is not valid URL-safe base64.
        TokenPayloadError: If the payload is not a JSON object.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise MalformedTokenError(f"invalid token: must have 3 parts, got {len(parts)}")

    try:
        payload = _b64url_decode(parts[1])
    except (binascii.Error, ValueError) as exc:
        raise TokenEncodingError("failed to decode token payload") from exc

    try:
        claims = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise TokenPayloadError("failed to decode JSON payload") from exc
    if not isinstance(claims, dict):
        raise TokenPayloadError("failed to decode JSON payload: not an object")
    return claims


_B64URL_SEGMENT = re.compile(r"[A-Za-z0-9_-]*")


def _b64url_decode(segment: str) -> bytes:
    # RFC 7515 base64url: no padding, no characters outside the URL-safe alphabet.
    if not _B64URL_SEGMENT.fullmatch(segment) or len(segment) % 4 == 1:
        raise ValueError("invalid unpadded base64url segment")
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
