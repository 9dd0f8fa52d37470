"""In-memory access-token cache with expiry tracking.

A token is treated as usable only while it is more than
:data:`FRESHNESS_MARGIN` seconds away from expiry, so that a request never
leaves with a token that expires mid-flight.

Expiry comes from the token's own ``exp`` claim (see
:mod:`efipix.auth.claims`); the claims are decoded again on every check and
never stored. Opaque tokens, values with no ``.`` at all, carry no claims
and are aged with ``issued_at + expires_in`` instead.

See Also:
    :class:`~efipix.auth.session.EfiSession` -- the only writer of the cache.
"""

from __future__ import annotations

import threading
from typing import Optional

from efipix.auth.claims import decode_claims
from efipix.models import Token

FRESHNESS_MARGIN = 30
"""Seconds before expiry at which a token is already considered stale."""


def is_fresh(token: Optional[Token], now: float) -> bool:
    """Return whether *token* can still be sent at time *now*.

    Args:
        token: The cached token, or ``None`` on a cold cache.
        now: Current time in seconds since the epoch.

    Returns:
        ``True`` only if the token has a value and expires strictly after
        ``now + FRESHNESS_MARGIN``. A JWT without a numeric ``exp`` claim is
        never fresh.

    Raises:
        TokenDecodeError: If the token looks like a JWT but its claims cannot
            be decoded. This signals a corrupt cache, not expiry.
    """
    if token is None or not token.access_token:
        return False

    if "." not in token.access_token:
        expires_at = token.issued_at + token.expires_in
        return expires_at > now + FRESHNESS_MARGIN

    claims = decode_claims(token.access_token)
    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return False
    return exp > now + FRESHNESS_MARGIN


class TokenCache:
    """Thread-safe holder for the single most recent access token.

    The cache only ever holds one token. Writes replace it wholesale;
    :meth:`clear` returns the cache to its cold state.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._token: Optional[Token] = None

    def get(self) -> Optional[Token]:
        with self._lock:
            return self._token

    def set(self, token: Token) -> None:
        with self._lock:
            self._token = token

    def clear(self) -> None:
        with self._lock:
            self._token = None
