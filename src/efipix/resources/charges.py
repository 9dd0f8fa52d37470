"""Immediate charges (``cob``)."""

from __future__ import annotations

import logging
from typing import Any, Optional

from efipix.exceptions import InvalidResponseError, MissingArgumentError, NoPixKeysError
from efipix.models import Charge, ChargeList
from efipix.resources.base import Resource, path_segment
from efipix.resources.keys import KeysResource

logger = logging.getLogger(__name__)

COB_PATH = "/v2/cob"


class ChargesResource(Resource):
    """Create, fetch, revise and list immediate charges."""

    def create(self, charge: Charge) -> Charge:
        """Create an immediate charge.

        If ``charge.chave`` is empty, the first random key registered for the
        account is used. With a ``txid`` the charge is created under that
        identifier (``PUT /v2/cob/{txid}``), otherwise the provider assigns
        one (``POST /v2/cob``). The provider answers 201 in both cases.

        Args:
            charge: The charge to create. It is not modified.

        Returns:
            The charge as stored by the provider, including ``txid``,
            ``loc`` and ``pixCopiaECola``.

        Raises:
            NoPixKeysError: If no key was given and the account has none.
            ProviderError: If the provider rejects the charge.
        """
        if not charge.chave:
            keys = KeysResource(self._session).list()
            if not keys.chaves:
                raise NoPixKeysError()
            logger.debug("No key on charge, using first account key")
            charge = charge.model_copy(update={"chave": keys.chaves[0]})

        if charge.txid:
            method, path = "PUT", f"{COB_PATH}/{path_segment(charge.txid)}"
        else:
            method, path = "POST", COB_PATH

        data = self._request(method, path, expected_status=201, json_body=charge.to_wire())
        return _charge_from(data)

    def fetch(self, txid: str) -> Charge:
        """Fetch a charge by ``txid`` (``GET``, 200)."""
        if not txid:
            raise MissingArgumentError("txid")
        data = self._request("GET", f"{COB_PATH}/{path_segment(txid)}", expected_status=200)
        return _charge_from(data)

    def update(self, txid: str, charge: Charge) -> Charge:
        """Revise an existing charge (``PATCH``, 200).

        Only the fields set on *charge* are sent.
        """
        if not txid:
            raise MissingArgumentError("txid")
        body = charge.to_wire()
        body.pop("txid", None)
        data = self._request(
            "PATCH", f"{COB_PATH}/{path_segment(txid)}", expected_status=200, json_body=body
        )
        return _charge_from(data)

    def list(
        self,
        inicio: str,
        fim: str,
        *,
        cpf: Optional[str] = None,
        cnpj: Optional[str] = None,
        status: Optional[str] = None,
        pagina_atual: Optional[int] = None,
        itens_por_pagina: Optional[int] = None,
    ) -> ChargeList:
        """List charges created between *inicio* and *fim* (RFC 3339 timestamps)."""
        params: dict[str, Any] = {
            "inicio": inicio,
            "fim": fim,
            "cpf": cpf,
            "cnpj": cnpj,
            "status": status,
            "paginacao.paginaAtual": pagina_atual,
            "paginacao.itensPorPagina": itens_por_pagina,
        }
        data = self._request("GET", COB_PATH, expected_status=200, params=params)
        return ChargeList.model_validate(data or {})


def _charge_from(data: Any) -> Charge:
    if not isinstance(data, dict):
        raise InvalidResponseError("charge response is not a JSON object")
    return Charge.model_validate(data)
