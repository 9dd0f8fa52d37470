"""Webhook registration for PIX keys.

The provider calls the registered URL whenever a payment to the key
settles. By default it requires the receiving server to do mutual TLS
with the provider's certificate; ``skip_mtls=True`` sends the
``x-skip-mtls-checking`` header for servers that cannot.
"""

from __future__ import annotations

from typing import Any, Optional

from efipix.exceptions import InvalidResponseError, MissingArgumentError
from efipix.models import Webhook, WebhookList
from efipix.resources.base import Resource, path_segment

WEBHOOK_PATH = "/v2/webhook"


class WebhooksResource(Resource):
    """Configure, inspect, list and remove webhooks."""

    def create(self, chave: str, webhook_url: str, skip_mtls: bool = False) -> Webhook:
        """Register (or replace) the webhook for *chave* (``PUT``).

        The key travels only in the path; the body carries just the URL.
        The provider answers 201 for a new webhook and 200 when it replaces
        an existing one.

        Returns:
            The webhook as reported by the provider. When the response has
            no body the requested values are returned.
        """
        if not chave:
            raise MissingArgumentError("chave")
        data = self._request(
            "PUT",
            f"{WEBHOOK_PATH}/{path_segment(chave)}",
            expected_status=(200, 201),
            json_body={"webhookUrl": webhook_url},
            headers={"x-skip-mtls-checking": "true" if skip_mtls else "false"},
        )
        if data is None:
            return Webhook(chave=chave, webhook_url=webhook_url)
        return _webhook_from(data)

    def fetch(self, chave: str) -> Webhook:
        """Return the webhook registered for *chave* (``GET``, 200)."""
        if not chave:
            raise MissingArgumentError("chave")
        data = self._request("GET", f"{WEBHOOK_PATH}/{path_segment(chave)}", expected_status=200)
        return _webhook_from(data)

    def list(
        self,
        inicio: str,
        fim: str,
        *,
        pagina_atual: Optional[int] = None,
        itens_por_pagina: Optional[int] = None,
    ) -> WebhookList:
        """List webhooks created between *inicio* and *fim* (``GET``, 200)."""
        params: dict[str, Any] = {
            "inicio": inicio,
            "fim": fim,
            "paginacao.paginaAtual": pagina_atual,
            "paginacao.itensPorPagina": itens_por_pagina,
        }
        data = self._request("GET", WEBHOOK_PATH, expected_status=200, params=params)
        return WebhookList.model_validate(data or {})

    def delete(self, chave: str) -> None:
        """Remove the webhook for *chave* (``DELETE``, 204, no body)."""
        if not chave:
            raise MissingArgumentError("chave")
        self._request("DELETE", f"{WEBHOOK_PATH}/{path_segment(chave)}", expected_status=204)


def _webhook_from(data: Any) -> Webhook:
    if not isinstance(data, dict):
        raise InvalidResponseError("webhook response is not a JSON object")
    return Webhook.model_validate(data)
