"""Client certificate loading for mutual TLS.

The PIX API requires every connection, including the token exchange, to
present the integration's client certificate. :func:`load_identity` turns a
certificate/key pair on disk into an :class:`ssl.SSLContext` that httpx can
use as its ``verify`` argument: server certificates are still verified
against the :mod:`certifi` trust store, and the client chain is offered
during the handshake.

:class:`IdentityCache` keeps the loaded context per ``(cert, key)`` pair so
that repeated exchanges do not re-read and re-parse the PEM files.
"""

from __future__ import annotations

import logging
import ssl
import threading
from typing import Optional

import certifi

from efipix.exceptions import CertificateError

logger = logging.getLogger(__name__)


def load_identity(cert_path: str, key_path: str) -> ssl.SSLContext:
    """Build a client TLS context presenting the given certificate.

    Args:
        cert_path: PEM file holding the client certificate (optionally
            followed by its chain). Provider bundles that contain both the
            certificate and the key in one file are accepted as well.
        key_path: PEM file holding the matching private key.

    Returns:
        A client-side :class:`ssl.SSLContext` with hostname checking and
        certificate verification enabled.

    Raises:
        CertificateError: If either file is unreadable, not valid PEM, or
            the key does not match the certificate.
    """
    context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH, cafile=certifi.where())
    try:
        context.load_cert_chain(certfile=cert_path, keyfile=key_path)
    except ssl.SSLError as exc:
        raise CertificateError(
            f"failed to load certificates from {cert_path} and {key_path}: {exc}"
        ) from exc
    except OSError as exc:
        raise CertificateError(
            f"failed to read certificates from {cert_path} and {key_path}: {exc}"
        ) from exc
    logger.debug("Loaded client certificate %s", cert_path)
    return context


class IdentityCache:
    """Memoises :func:`load_identity` per ``(cert_path, key_path)`` pair.

    Failed loads are not cached, so fixing the files on disk and retrying
    works without reconfiguring.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._key: Optional[tuple[str, str]] = None
        self._context: Optional[ssl.SSLContext] = None

    def get(self, cert_path: str, key_path: str) -> ssl.SSLContext:
        with self._lock:
            key = (cert_path, key_path)
            if self._context is None or self._key != key:
                self._context = load_identity(cert_path, key_path)
                self._key = key
            return self._context

    def clear(self) -> None:
        with self._lock:
            self._key = None
            self._context = None
