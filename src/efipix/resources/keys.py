"""Random PIX keys (EVP) registered for the account."""

from __future__ import annotations

from efipix.exceptions import InvalidResponseError, MissingArgumentError
from efipix.models import KeyList
from efipix.resources.base import Resource, path_segment

EVP_PATH = "/v2/gn/evp"


class KeysResource(Resource):
    """List, create and delete random PIX keys."""

    def list(self) -> KeyList:
        """Return the random keys registered for the account (``GET``, 200)."""
        data = self._request("GET", EVP_PATH, expected_status=200)
        return KeyList.model_validate(data or {})

    def create(self) -> str:
        """Register a new random key and return it (``POST``, 201).

        Raises:
            InvalidResponseError: If the response does not carry the new key.
        """
        data = self._request("POST", EVP_PATH, expected_status=201)
        chave = (data or {}).get("chave") if isinstance(data, dict) else None
        if not chave:
            raise InvalidResponseError("key creation response missing 'chave' field")
        return chave

    def delete(self, chave: str) -> None:
        """Remove a random key (``DELETE``, 200)."""
        if not chave:
            raise MissingArgumentError("chave")
        self._request("DELETE", f"{EVP_PATH}/{path_segment(chave)}", expected_status=200)
