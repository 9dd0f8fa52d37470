"""Shared plumbing for resource classes."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from efipix.auth.session import EfiSession
from efipix.client.sync_client import PixClient


class Resource:
    """Base class for the PIX resource groups.

    Each operation opens its own :class:`~efipix.client.PixClient` (and so
    its own mTLS connection) and closes it before returning.

    Args:
        session: The configured session to authenticate with.
    """

    def __init__(self, session: EfiSession) -> None:
        self._session = session

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        with PixClient(self._session) as client:
            return client.request(method, path, **kwargs)


def path_segment(value: str) -> str:
    """Escape *value* for use as a single URL path segment."""
    return quote(value, safe="")
