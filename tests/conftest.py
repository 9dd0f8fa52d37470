"""Shared test fixtures for efipix.

Provides a throwaway client certificate, credentials pointing at it, a
controllable clock, helpers to mint JWT-shaped tokens, and a fake PIX
provider served through :class:`httpx.MockTransport`. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import base64
import datetime
import json
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from efipix.auth.session import EfiSession
from efipix.models import Credentials
from efipix.output import reset_logging


NOW = 1_700_000_000.0


# ---------------------------------------------------------------------------
# Certificates
# ---------------------------------------------------------------------------


def write_identity(directory: Path, name: str) -> tuple[str, str]:
    """Write a self-signed certificate and its private key as PEM files."""
    key = ec.generate_private_key(ec.SECP256R1())
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, f"efipix-test-{name}")])
    issued = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(issued - datetime.timedelta(days=1))
        .not_valid_after(issued + datetime.timedelta(days=30))
        .sign(key, hashes.SHA256())
    )
    cert_path = directory / f"{name}.pem"
    key_path = directory / f"{name}.key"
    cert_path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    key_path.write_bytes(
        key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    return str(cert_path), str(key_path)


@pytest.fixture(scope="session")
def identity_files(tmp_path_factory: pytest.TempPathFactory) -> tuple[str, str]:
    """(cert_path, key_path) of a valid client identity."""
    return write_identity(tmp_path_factory.mktemp("certs"), "client")


@pytest.fixture(scope="session")
def other_identity_files(tmp_path_factory: pytest.TempPathFactory) -> tuple[str, str]:
    """A second, unrelated identity (for mismatched-pair tests)."""
    return write_identity(tmp_path_factory.mktemp("other-certs"), "other")


@pytest.fixture
def credentials(identity_files: tuple[str, str]) -> Credentials:
    """Sandbox credentials pointing at the test identity."""
    cert_path, key_path = identity_files
    return Credentials(
        client_id="Client_Id_test",
        client_secret="Client_Secret_test",
        timeout=5,
        sandbox=True,
        ca_path=cert_path,
        key_path=key_path,
    )


# ---------------------------------------------------------------------------
# Tokens and time
# ---------------------------------------------------------------------------


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def make_jwt(claims: dict[str, Any]) -> str:
    """Build an unsigned JWT-shaped token carrying *claims*."""
    header = _b64url(json.dumps({"alg": "RS256", "typ": "JWT"}).encode())
    payload = _b64url(json.dumps(claims).encode())
    return f"{header}.{payload}.c2lnbmF0dXJl"


@pytest.fixture
def jwt_factory() -> Callable[..., str]:
    """Return a function minting JWT-shaped tokens: ``jwt_factory(exp=...)``."""

    def _factory(**claims: Any) -> str:
        return make_jwt(claims)

    return _factory


class FakeClock:
    """Manually advanced clock, in seconds since the epoch."""

    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Fake provider
# ---------------------------------------------------------------------------


Reply = Callable[[httpx.Request], httpx.Response]


class FakeProvider:
    """In-memory stand-in for the PIX API.

    ``/oauth/token`` answers with :attr:`token_reply` (a 200 carrying a
    one-hour JWT by default). Other endpoints answer with whatever was
    registered through :meth:`route`, or 404.
    """

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.requests: list[httpx.Request] = []
        self.token_reply: Optional[Reply] = None
        self._routes: dict[tuple[str, str], Reply] = {}

    @property
    def token_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/oauth/token"]

    @property
    def api_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path != "/oauth/token"]

    def issue(self, access_token: str, token_type: str = "Bearer", expires_in: int = 3600) -> None:
        """Make the token endpoint grant *access_token*."""
        body = {
            "access_token": access_token,
            "token_type": token_type,
            "expires_in": expires_in,
            "scope": "cob.read cob.write",
        }
        self.token_reply = lambda request: httpx.Response(200, json=body)

    def route(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json_body: Any = None,
        reply: Optional[Reply] = None,
    ) -> None:
        if reply is None:
            if json_body is not None:
                reply = lambda request: httpx.Response(status_code, json=json_body)
            else:
                reply = lambda request: httpx.Response(status_code)
        self._routes[(method.upper(), path)] = reply

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/oauth/token":
            reply = self.token_reply or self._default_token
        else:
            reply = self._routes.get((request.method, request.url.path))
            if reply is None:
                return httpx.Response(404, json={"nome": "nao_encontrado"})
        assert reply is not None
        return reply(request)

    def _default_token(self, request: httpx.Request) -> httpx.Response:
        token = make_jwt({"exp": int(self.clock()) + 3600})
        return httpx.Response(
            200,
            json={"access_token": token, "token_type": "Bearer", "expires_in": 3600},
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def provider(clock: FakeClock) -> FakeProvider:
    return FakeProvider(clock)


@pytest.fixture
def session(credentials: Credentials, provider: FakeProvider, clock: FakeClock) -> EfiSession:
    """A configured sandbox session talking to the fake provider."""
    return EfiSession(credentials, transport=provider.transport, clock=clock)


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_logging_between_tests() -> None:
    """Remove any Rich handler a test installed on the efipix logger."""
    yield
    reset_logging()
