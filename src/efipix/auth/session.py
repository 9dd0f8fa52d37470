"""Authenticated session -- credentials, token exchange and mTLS clients.

:class:`EfiSession` is the object every resource call goes through. It owns
exactly one active :class:`~efipix.models.Credentials` set and one cached
:class:`~efipix.models.Token`, and hands out two things:

- :meth:`EfiSession.authorization` -- the ``authorization`` header value,
  served from cache while the token is fresh, otherwise obtained through the
  OAuth2 client-credentials grant (:rfc:`6749` section 4.4).
- :meth:`EfiSession.build_client` -- an :class:`httpx.Client` bound to the
  selected environment whose transport presents the client certificate.

Lifecycle::

    Unconfigured --configure()--> ColdCache --exchange--> Fresh
    Fresh --(within 30 s of exp)--> Stale --exchange--> Fresh | Failed

Nothing here retries. A failed exchange leaves the cache as it was, so the
next call simply tries again.

See Also:
    :class:`~efipix.client.sync_client.PixClient` -- the resource-call
    executor built on top of a session.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from typing import Any, Callable, Mapping, Optional, Union

import httpx
from pydantic import ValidationError

from efipix.auth.certificates import IdentityCache
from efipix.auth.token_cache import TokenCache, is_fresh
from efipix.config import base_url_for, describe_validation_error
from efipix.exceptions import (
    ConfigError,
    CredentialFileNotFoundError,
    InvalidResponseError,
    NetworkError,
    NotConfiguredError,
    ProviderError,
    TokenDecodeError,
)
from efipix.models import Credentials, ErrorDetail, Token

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth/token"


class EfiSession:
    """One configured PIX integration: credentials plus cached access token.

    Sessions are independent of each other; an application that talks to
    both environments keeps one session per environment. Within a session,
    concurrent callers share a single in-flight token exchange.

    Args:
        credentials: Optional credential set (or mapping) to configure
            immediately. See :meth:`configure`.
        transport: Optional :class:`httpx.BaseTransport` used by every
            client this session builds (tests use
            :class:`httpx.MockTransport`).
        clock: Returns the current time in seconds since the epoch.

    Example::

        session = EfiSession(credentials)
        with session.build_client() as client:
            client.get("/v2/gn/evp", headers={"authorization": session.authorization()})
    """

    def __init__(
        self,
        credentials: Union[Credentials, Mapping[str, Any], None] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._credentials: Optional[Credentials] = None
        self._base_url: Optional[str] = None
        self._transport = transport
        self._clock = clock
        self._cache = TokenCache()
        self._identities = IdentityCache()
        # Serialises configure() against exchanges and coalesces concurrent
        # exchanges into one.
        self._lock = threading.Lock()
        if credentials is not None:
            self.configure(credentials)

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    def configure(self, credentials: Union[Credentials, Mapping[str, Any]]) -> None:
        """Validate *credentials* and make them the session's active set.

        Replaces any previously configured credentials and discards the
        cached token and loaded certificate that belonged to them.

        Args:
            credentials: A :class:`~efipix.models.Credentials` instance or a
                mapping with its fields (snake_case or camelCase).

        Raises:
            ConfigError: If a field is missing or invalid (the message names
                every offending field), or a certificate file is unreadable.
            CredentialFileNotFoundError: If the certificate or key path does
                not reference an existing file.
        """
        if not isinstance(credentials, Credentials):
            try:
                credentials = Credentials.model_validate(credentials)
            except ValidationError as exc:
                raise ConfigError(describe_validation_error(exc)) from exc

        for path in (credentials.ca_path, credentials.key_path):
            if not os.path.isfile(path):
                raise CredentialFileNotFoundError(path)
            if not os.access(path, os.R_OK):
                raise ConfigError(f"file {path} is not readable")

        with self._lock:
            self._credentials = credentials
            self._base_url = base_url_for(credentials.sandbox)
            self._cache.clear()
            self._identities.clear()
        logger.debug("Session configured for %s (client %s)", self._base_url, credentials.client_id)

    @property
    def is_configured(self) -> bool:
        return self._credentials is not None

    @property
    def credentials(self) -> Credentials:
        """The active credential set.

        Raises:
            NotConfiguredError: If :meth:`configure` has not succeeded yet.
        """
        if self._credentials is None:
            raise NotConfiguredError()
        return self._credentials

    @property
    def base_url(self) -> str:
        """The API host selected by the ``sandbox`` flag."""
        if self._base_url is None:
            raise NotConfiguredError()
        return self._base_url

    # ------------------------------------------------------------------ #
    # Authorization
    # ------------------------------------------------------------------ #

    def authorization(self) -> str:
        """Return the ``authorization`` header value, ``"{type} {token}"``.

        Raises:
            NotConfiguredError: If the session has no credentials.
            TokenDecodeError: If the cached token was corrupt. The cache is
                cleared, so the next call performs a fresh exchange.
            CertificateError: If the client certificate cannot be loaded.
            NetworkError: If the token endpoint cannot be reached.
            ProviderError: If the token endpoint rejects the credentials.
            InvalidResponseError: If a 200 response carries no usable token.
        """
        return self.token().authorization

    def token(self) -> Token:
        """Return a fresh access token, exchanging credentials if needed.

        Same contract as :meth:`authorization`, returning the whole
        :class:`~efipix.models.Token`.
        """
        with self._lock:
            credentials = self.credentials
            cached = self._cache.get()
            try:
                if is_fresh(cached, self._clock()):
                    return cached  # type: ignore[return-value]
            except TokenDecodeError:
                self._cache.clear()
                raise

            token = self._exchange(credentials)
            self._cache.set(token)
            return token

    def invalidate(self) -> None:
        """Drop the cached token so that the next call re-authenticates."""
        self._cache.clear()

    # ------------------------------------------------------------------ #
    # HTTP
    # ------------------------------------------------------------------ #

    def build_client(self, **kwargs: Any) -> httpx.Client:
        """Create an :class:`httpx.Client` that authenticates with mutual TLS.

        The client is bound to :attr:`base_url` and to the configured
        timeout. The caller owns it and must close it (use it as a context
        manager).

        Args:
            **kwargs: Extra :class:`httpx.Client` arguments.

        Raises:
            NotConfiguredError: If the session has no credentials.
            CertificateError: If the certificate/key pair cannot be loaded.
        """
        credentials = self.credentials
        context = self._identities.get(credentials.ca_path, credentials.key_path)
        options: dict[str, Any] = {
            "base_url": self.base_url,
            "timeout": float(credentials.timeout),
            "verify": context,
        }
        if self._transport is not None:
            options["transport"] = self._transport
        options.update(kwargs)
        return httpx.Client(**options)

    def _exchange(self, credentials: Credentials) -> Token:
        """Run the client-credentials grant against ``/oauth/token``."""
        logger.debug("Requesting access token from %s%s", self.base_url, TOKEN_PATH)
        with self.build_client() as client:
            try:
                response = client.post(
                    TOKEN_PATH,
                    json={"grant_type": "client_credentials"},
                    auth=(credentials.client_id, credentials.client_secret),
                    headers={"Content-Type": "application/json"},
                )
            except httpx.TransportError as exc:
                raise NetworkError(f"token request failed: {exc}") from exc

        # The body is decoded before the status is checked so that error
        # responses still yield the provider's diagnostics.
        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code != 200:
            raise ProviderError(
                response.status_code,
                detail=ErrorDetail.from_body(body),
                body=response.text,
            )

        if not isinstance(body, dict):
            raise InvalidResponseError("token response is not a JSON object")
        try:
            token = Token.model_validate({**body, "issued_at": self._clock()})
        except ValidationError as exc:
            raise InvalidResponseError(f"invalid token response: {exc}") from exc
        if not token.access_token:
            raise InvalidResponseError("token response missing 'access_token' field")

        logger.debug("Obtained %s token valid for %ss", token.token_type, token.expires_in)
        return token
