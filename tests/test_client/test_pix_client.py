"""Tests for the authorized request executor."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from efipix.auth.session import EfiSession
from efipix.client.sync_client import PixClient
from efipix.exceptions import (
    InvalidResponseError,
    NetworkError,
    NotConfiguredError,
    ProviderError,
)


# ---------------------------------------------------------------------------
# Context manager
# ---------------------------------------------------------------------------


class TestContextManager:
    def test_enter_creates_client(self, session: EfiSession) -> None:
        client = PixClient(session)
        assert client._client is None
        with client:
            assert client._client is not None
        assert client._client is None

    def test_base_url_from_session(self, session: EfiSession) -> None:
        with PixClient(session) as client:
            assert str(client._client.base_url).startswith("https://pix-h.api.efipay.com.br")

    def test_unconfigured_session(self) -> None:
        with pytest.raises(NotConfiguredError):
            with PixClient(EfiSession()):
                pass


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class TestRequest:
    def test_authorization_header(self, session: EfiSession, provider: Any) -> None:
        provider.issue("abc")
        provider.route("GET", "/v2/gn/evp", json_body={"chaves": []})

        with PixClient(session) as client:
            client.get("/v2/gn/evp")

        (request,) = provider.api_requests
        assert request.headers["authorization"] == "Bearer abc"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Accept"] == "application/json"

    def test_token_reused_across_calls(self, session: EfiSession, provider: Any) -> None:
        provider.route("GET", "/v2/gn/evp", json_body={"chaves": []})
        with PixClient(session) as client:
            client.get("/v2/gn/evp")
            client.get("/v2/gn/evp")
        assert len(provider.token_requests) == 1
        assert len(provider.api_requests) == 2

    def test_returns_decoded_json(self, session: EfiSession, provider: Any) -> None:
        provider.route("GET", "/v2/cob/abc", json_body={"txid": "abc", "status": "ATIVA"})
        with PixClient(session) as client:
            assert client.get("/v2/cob/abc") == {"txid": "abc", "status": "ATIVA"}

    def test_json_body(self, session: EfiSession, provider: Any) -> None:
        provider.route("POST", "/v2/cob", status_code=201, json_body={"txid": "new"})
        with PixClient(session) as client:
            client.post("/v2/cob", expected_status=201, json_body={"valor": {"original": "1.00"}})
        (request,) = provider.api_requests
        assert json.loads(request.content) == {"valor": {"original": "1.00"}}

    def test_params_drop_none(self, session: EfiSession, provider: Any) -> None:
        provider.route("GET", "/v2/cob", json_body={"cobs": []})
        with PixClient(session) as client:
            client.get("/v2/cob", params={"inicio": "a", "fim": "b", "cpf": None})
        (request,) = provider.api_requests
        assert dict(request.url.params) == {"inicio": "a", "fim": "b"}

    def test_extra_headers(self, session: EfiSession, provider: Any) -> None:
        provider.route("PUT", "/v2/webhook/k", json_body={})
        with PixClient(session) as client:
            client.put("/v2/webhook/k", headers={"x-skip-mtls-checking": "true"})
        assert provider.api_requests[0].headers["x-skip-mtls-checking"] == "true"

    def test_empty_body_returns_none(self, session: EfiSession, provider: Any) -> None:
        provider.route("DELETE", "/v2/webhook/k", status_code=204)
        with PixClient(session) as client:
            assert client.delete("/v2/webhook/k", expected_status=204) is None

    def test_several_expected_statuses(self, session: EfiSession, provider: Any) -> None:
        provider.route("PUT", "/v2/webhook/k", status_code=200, json_body={"chave": "k"})
        with PixClient(session) as client:
            assert client.put("/v2/webhook/k", expected_status=(200, 201)) == {"chave": "k"}

    def test_patch(self, session: EfiSession, provider: Any) -> None:
        provider.route("PATCH", "/v2/cob/abc", json_body={"txid": "abc", "revisao": 1})
        with PixClient(session) as client:
            assert client.patch("/v2/cob/abc", json_body={"status": "REMOVIDA_PELO_USUARIO_RECEBEDOR"})[
                "revisao"
            ] == 1


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    def test_unexpected_status(self, session: EfiSession, provider: Any) -> None:
        provider.route(
            "POST",
            "/v2/cob",
            status_code=400,
            json_body={
                "name": "valor_invalido",
                "message": "Campo valor inválido",
                "errors": [{"key": "valor", "path": "$.valor.original", "message": "formato"}],
            },
        )
        with PixClient(session) as client:
            with pytest.raises(ProviderError) as exc_info:
                client.post("/v2/cob", expected_status=201, json_body={})
        err = exc_info.value
        assert err.status_code == 400
        assert err.detail.name == "valor_invalido"
        assert err.detail.errors[0].path == "$.valor.original"
        assert "valor_invalido" in err.body
        assert str(err).startswith("bad request: HTTP 400")

    def test_success_status_not_expected(self, session: EfiSession, provider: Any) -> None:
        provider.route("POST", "/v2/cob", status_code=200, json_body={})
        with PixClient(session) as client:
            with pytest.raises(ProviderError) as exc_info:
                client.post("/v2/cob", expected_status=201)
        assert exc_info.value.status_code == 200

    def test_unknown_route(self, session: EfiSession) -> None:
        with PixClient(session) as client:
            with pytest.raises(ProviderError) as exc_info:
                client.get("/v2/nowhere")
        assert exc_info.value.status_code == 404

    def test_error_without_body(self, session: EfiSession, provider: Any) -> None:
        provider.route("GET", "/v2/gn/evp", status_code=503)
        with PixClient(session) as client:
            with pytest.raises(ProviderError) as exc_info:
                client.get("/v2/gn/evp")
        assert exc_info.value.detail.describe() == ""
        assert str(exc_info.value) == "bad request: HTTP 503"

    def test_unauthorized_keeps_cached_token(self, session: EfiSession, provider: Any) -> None:
        provider.route("GET", "/v2/gn/evp", status_code=401, json_body={"nome": "nao_autorizado"})
        with PixClient(session) as client:
            with pytest.raises(ProviderError):
                client.get("/v2/gn/evp")
            with pytest.raises(ProviderError):
                client.get("/v2/gn/evp")
        assert len(provider.token_requests) == 1

    def test_transport_error(self, session: EfiSession, provider: Any) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        provider.route("GET", "/v2/gn/evp", reply=refuse)
        with PixClient(session) as client:
            with pytest.raises(NetworkError, match="GET /v2/gn/evp"):
                client.get("/v2/gn/evp")

    def test_invalid_json_on_success(self, session: EfiSession, provider: Any) -> None:
        provider.route(
            "GET", "/v2/gn/evp", reply=lambda request: httpx.Response(200, text="<html>")
        )
        with PixClient(session) as client:
            with pytest.raises(InvalidResponseError):
                client.get("/v2/gn/evp")

    def test_token_failure_sends_no_request(self, session: EfiSession, provider: Any) -> None:
        provider.token_reply = lambda request: httpx.Response(400, json={"error": "invalid_client"})
        provider.route("GET", "/v2/gn/evp", json_body={"chaves": []})
        with PixClient(session) as client:
            with pytest.raises(ProviderError):
                client.get("/v2/gn/evp")
        assert provider.api_requests == []
