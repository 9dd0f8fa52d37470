"""Synchronous executor for authorized PIX API calls.

This module provides :class:`PixClient`, the blocking HTTP client every
resource operation goes through. It wraps the mutually-authenticated
:class:`httpx.Client` built by an :class:`~efipix.auth.session.EfiSession`
and layers on:

- **Auth injection** -- the session's ``authorization`` header is attached
  to every request, along with ``Content-Type: application/json``.
- **Status checking** -- each call names the status it expects (200 for
  reads, 201 for creates, 204 for deletes); anything else raises
  :class:`~efipix.exceptions.ProviderError` carrying the provider's
  diagnostics.
- **Error mapping** -- transport failures raise
  :class:`~efipix.exceptions.NetworkError`.

Nothing is retried: a failed call surfaces to the caller and
the next call starts over.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Union

import httpx

from efipix.auth.session import EfiSession
from efipix.client.response import extract_error_detail, extract_response_data
from efipix.exceptions import NetworkError, ProviderError

logger = logging.getLogger(__name__)

ExpectedStatus = Union[int, Iterable[int]]


class PixClient:
    """Synchronous client for authorized PIX API calls.

    Must be used as a context manager so that the underlying mTLS
    transport is opened and closed.

    Args:
        session: The configured session supplying credentials, the
            authorization header and the TLS identity.

    Example::

        with PixClient(session) as client:
            keys = client.get("/v2/gn/evp")
    """

    def __init__(self, session: EfiSession) -> None:
        self._session = session
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> PixClient:
        self._client = self._session.build_client(headers={"Accept": "application/json"})
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: str,
        path: str,
        expected_status: ExpectedStatus = 200,
        json_body: Optional[Any] = None,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Send one authorized request and decode the response.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            path: URL path, appended to the session's base URL.
            expected_status: The status code (or codes) that mean success.
            json_body: JSON-serialisable request body.
            params: Query parameters; ``None`` values are dropped.
            headers: Extra request headers.

        Returns:
            The decoded JSON body, or ``None`` for an empty body.

        Raises:
            NotConfiguredError: If the session has no credentials.
            NetworkError: On connection, timeout or TLS failures.
            ProviderError: If the status is not one of *expected_status*.
            InvalidResponseError: If a successful body is not valid JSON.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        expected = (
            {expected_status} if isinstance(expected_status, int) else set(expected_status)
        )
        merged_headers: dict[str, str] = {
            "Content-Type": "application/json",
            "authorization": self._session.authorization(),
        }
        merged_headers.update(headers or {})
        merged_params = {k: v for k, v in (params or {}).items() if v is not None}

        logger.debug("%s %s", method.upper(), path)
        try:
            response = self._client.request(
                method,
                path,
                params=merged_params or None,
                json=json_body,
                headers=merged_headers,
            )
        except httpx.TransportError as exc:
            raise NetworkError(f"{method.upper()} {path} failed: {exc}") from exc

        if response.status_code not in expected:
            raise ProviderError(
                response.status_code,
                detail=extract_error_detail(response),
                body=response.text,
            )

        return extract_response_data(response)

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> Any:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> Any:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.request("DELETE", path, **kwargs)
