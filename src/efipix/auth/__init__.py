"""Authenticated-session core for the PIX API.

The main entry points are:

- :class:`EfiSession` -- holds the active credentials and cached token and
  builds mutually-authenticated HTTP clients.
- :func:`decode_claims` -- reads a token's claims without verifying it.
- :func:`is_fresh` / :class:`TokenCache` -- expiry tracking with a 30-second
  safety margin.
- :func:`load_identity` -- loads the client certificate into a TLS context.

Typical usage::

    from efipix.auth import EfiSession

    session = EfiSession(credentials)
    header = session.authorization()   # "Bearer eyJ..."
"""

from efipix.auth.certificates import IdentityCache, load_identity
from efipix.auth.claims import decode_claims
from efipix.auth.session import EfiSession
from efipix.auth.token_cache import FRESHNESS_MARGIN, TokenCache, is_fresh

__all__ = [
    "EfiSession",
    "FRESHNESS_MARGIN",
    "IdentityCache",
    "TokenCache",
    "decode_claims",
    "is_fresh",
    "load_identity",
]
