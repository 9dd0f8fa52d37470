"""Exception hierarchy for efipix.

All exceptions inherit from :class:`EfiPixError`, so callers that only care
about "the PIX call failed" can catch a single type, while callers that need
to react differently (reconfigure, replace a certificate, show provider
diagnostics) can catch the specific subclass.

Subclass hierarchy::

    EfiPixError
    +-- ConfigError
    |   +-- CredentialFileNotFoundError
    +-- NotConfiguredError
    +-- CertificateError
    +-- NetworkError
    +-- TokenDecodeError
    |   +-- MalformedTokenError
    |   +-- TokenEncodingError
    |   +-- TokenPayloadError
    +-- ProviderError
    +-- InvalidResponseError
    +-- NoPixKeysError
    +-- MissingArgumentError

Nothing in the library retries: every exception is raised to the immediate
caller, chained to the underlying cause with ``raise ... from exc``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from efipix.models import ErrorDetail


class EfiPixError(Exception):
    """Base exception for all efipix errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(EfiPixError):
    """Raised when a credential set is incomplete or otherwise invalid."""


class CredentialFileNotFoundError(ConfigError):
    """Raised when the certificate or key path does not reference an existing file.

    Args:
        path: The missing path, exactly as configured.
    """

    def __init__(self, path: str):
        super().__init__(f"file {path} not found")
        self.path = path


class NotConfiguredError(EfiPixError):
    """Raised when an operation needs credentials but the session has none."""

    def __init__(self, message: str = "client not configured; call configure() first"):
        super().__init__(message)


class CertificateError(EfiPixError):
    """Raised when the client certificate/key pair cannot be loaded.

    Covers unreadable files, malformed PEM data and a key that does not
    match the certificate. Not retryable: the material has to be fixed.
    """


class NetworkError(EfiPixError):
    """Raised on transport failures (timeout, connection refused, TLS handshake)."""


class TokenDecodeError(EfiPixError):
    """Raised when an access token's claims cannot be decoded.

    A decode failure on a cached token means the cache is corrupt; it is
    never reported as ordinary expiry.
    """


class MalformedTokenError(TokenDecodeError):
    """The token does not have exactly three dot-separated segments."""


class TokenEncodingError(TokenDecodeError):
    """The payload segment is not valid unpadded URL-safe base64."""


class TokenPayloadError(TokenDecodeError):
    """The decoded payload segment is not a JSON object."""


class ProviderError(EfiPixError):
    """Raised when the provider answers with an unexpected HTTP status.

    Carries the provider's structured diagnostics so that callers can show
    field-level problems without re-parsing the body.

    Args:
        status_code: The HTTP status returned by the provider.
        detail: The parsed :class:`~efipix.models.ErrorDetail`.
        body: The raw response body.
    """

    def __init__(self, status_code: int, detail: Optional[ErrorDetail] = None, body: str = ""):
        self.status_code = status_code
        self.detail = detail
        self.body = body
        super().__init__(f"bad request: HTTP {status_code}: {body}" if body else f"bad request: HTTP {status_code}")


class InvalidResponseError(EfiPixError):
    """Raised when a successful response carries a body that cannot be parsed."""


class NoPixKeysError(EfiPixError):
    """Raised when a charge needs a PIX key and the account has none."""

    def __init__(self, message: str = "no pix keys found"):
        super().__init__(message)


class MissingArgumentError(EfiPixError, ValueError):
    """Raised when an operation is called without a required identifier.

    Also a :class:`ValueError`, since the fault is in the caller's argument.

    Args:
        name: The missing argument (``txid``, ``chave``).
    """

    def __init__(self, name: str):
        super().__init__(f"{name} is required")
        self.name = name
