"""Canonical Pydantic models shared across all efipix modules.

The models fall into three groups:

**Session models** -- owned by :class:`~efipix.auth.session.EfiSession`:
    :class:`Credentials` and :class:`Token`.

**Error models** -- provider diagnostics attached to every failed call:
    :class:`FieldError` and :class:`ErrorDetail`.

**Resource models** -- request and response bodies of the PIX endpoints:
    :class:`Charge` (and its nested parts), :class:`ChargeList`,
    :class:`KeyList`, :class:`Webhook`, :class:`WebhookList`,
    :class:`Parametros` and :class:`Paginacao`.

The PIX API speaks camelCase Portuguese (``tipoCob``, ``pixCopiaECola``).
Resource models keep the Portuguese names in snake_case on the Python side
and generate the wire names with :func:`pydantic.alias_generators.to_camel`.
Unknown fields returned by the provider are preserved in ``model_extra``.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel


# --- Session models ---


class Credentials(BaseModel):
    """The long-lived identity of a PIX integration.

    Immutable once built. Constructing an instance validates that every
    field is present and non-empty and that ``timeout`` is a positive integer;
    :meth:`~efipix.auth.session.EfiSession.configure` additionally checks
    that both certificate paths exist and are readable.

    Both snake_case names and the camelCase names used by the provider's
    own tooling (``clientId``, ``timeoutSeconds``, ``caPath``...) are
    accepted.

    Example::

        Credentials(
            client_id="Client_Id_123",
            client_secret="Client_Secret_456",
            timeout=30,
            sandbox=True,
            ca_path="certs/homologacao.pem",
            key_path="certs/homologacao.key",
        )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    client_id: str = Field(min_length=1, alias="clientId")
    client_secret: str = Field(min_length=1, alias="clientSecret", repr=False)
    timeout: int = Field(gt=0, alias="timeoutSeconds", description="Request timeout in seconds")
    sandbox: bool = Field(default=False, description="Use the homologation environment")
    ca_path: str = Field(
        min_length=1, alias="caPath", description="Path to the client certificate (PEM)"
    )
    key_path: str = Field(
        min_length=1, alias="keyPath", description="Path to the client private key (PEM)"
    )

    @field_validator("timeout", mode="before")
    @classmethod
    def reject_bool_timeout(cls, value: Any) -> Any:
        # bool is an int subclass and would otherwise pass as 0 or 1.
        if isinstance(value, bool):
            raise ValueError("must be an integer number of seconds, not a boolean")
        return value


class Token(BaseModel):
    """An OAuth2 access token issued by the ``/oauth/token`` endpoint.

    Tokens are replaced, never edited. ``issued_at`` is not part of the
    provider's response; the session stamps it with the local clock when the
    exchange completes so that opaque (non-JWT) tokens can still be aged
    using ``expires_in``.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    access_token: str = ""
    token_type: str = ""
    expires_in: int = 0
    scope: str = ""
    issued_at: float = Field(default=0.0, exclude=True)

    @property
    def authorization(self) -> str:
        """The value of the ``authorization`` header, ``"{type} {token}"``."""
        return f"{self.token_type} {self.access_token}"


# --- Error models ---


class FieldError(BaseModel):
    """One field-level problem reported by the provider."""

    model_config = ConfigDict(extra="ignore")

    key: Optional[str] = None
    path: Optional[str] = None
    message: Optional[str] = None


class ErrorDetail(BaseModel):
    """Structured diagnostics the provider sends with a failed response.

    The OAuth endpoint uses ``error``/``error_description`` while the PIX
    endpoints use ``name``/``message`` plus a list of :class:`FieldError`;
    every field is therefore optional.
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    error_description: Optional[str] = None
    errors: Optional[list[FieldError]] = None

    @classmethod
    def from_body(cls, data: Any) -> ErrorDetail:
        """Build an instance from a decoded response body.

        Bodies that are not JSON objects, or whose fields have unexpected
        types, yield an empty :class:`ErrorDetail` rather than failing: the
        diagnostics are best-effort and the raw body is kept alongside them.
        """
        if not isinstance(data, dict):
            return cls()
        try:
            return cls.model_validate(data)
        except ValidationError:
            return cls()

    def describe(self) -> str:
        """Return the most specific human-readable message available."""
        parts = [
            p for p in (self.name or self.error, self.message or self.error_description) if p
        ]
        for field_error in self.errors or []:
            location = field_error.path or field_error.key
            if location and field_error.message:
                parts.append(f"{location}: {field_error.message}")
            elif field_error.message:
                parts.append(field_error.message)
        return "; ".join(parts)


# --- Resource models ---


class PixModel(BaseModel):
    """Base for request/response bodies exchanged with the PIX endpoints."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialise with camelCase names, leaving out unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Calendario(PixModel):
    criacao: Optional[str] = None
    expiracao: Optional[int] = Field(default=None, description="Seconds until the charge expires")
    data_de_vencimento: Optional[str] = None
    validade_apos_vencimento: Optional[int] = None


class Devedor(PixModel):
    cpf: Optional[str] = None
    cnpj: Optional[str] = None
    nome: Optional[str] = None
    logradouro: Optional[str] = None
    cidade: Optional[str] = None
    uf: Optional[str] = None
    cep: Optional[str] = None


class Multa(PixModel):
    modalidade: Optional[int] = None
    valor_perc: Optional[str] = None


class Juros(PixModel):
    modalidade: Optional[int] = None
    valor_perc: Optional[str] = None


class DescontoDataFixa(PixModel):
    data: Optional[str] = None
    valor_perc: Optional[str] = None


class Desconto(PixModel):
    modalidade: Optional[int] = None
    desconto_data_fixa: Optional[list[DescontoDataFixa]] = None


class Valor(PixModel):
    original: Optional[str] = Field(default=None, description="Amount as a decimal string, e.g. '12.34'")
    multa: Optional[Multa] = None
    juros: Optional[Juros] = None
    desconto: Optional[Desconto] = None


class InfoAdicional(PixModel):
    nome: Optional[str] = None
    valor: Optional[str] = None


class Loc(PixModel):
    id: Optional[int] = None
    location: Optional[str] = None
    tipo_cob: Optional[str] = None


class Pagador(PixModel):
    chave: Optional[str] = None
    info_pagador: Optional[str] = None


class Favorecido(PixModel):
    chave: Optional[str] = None


class Charge(PixModel):
    """An immediate charge (``cob``).

    When ``txid`` is set the charge is created with that identifier
    (``PUT /v2/cob/{txid}``); otherwise the provider assigns one.
    """

    tipo_cob: Optional[str] = None
    status: Optional[str] = None
    calendario: Optional[Calendario] = None
    location: Optional[str] = None
    txid: Optional[str] = None
    revisao: Optional[int] = None
    devedor: Optional[Devedor] = None
    pagador: Optional[Pagador] = None
    valor: Optional[Valor] = None
    chave: Optional[str] = None
    solicitacao_pagador: Optional[str] = None
    pix_copia_e_cola: Optional[str] = None
    info_adicionais: Optional[list[InfoAdicional]] = None
    loc: Optional[Loc] = None
    favorecido: Optional[Favorecido] = None


class Paginacao(PixModel):
    pagina_atual: int = 0
    itens_por_pagina: int = 0
    quantidade_de_paginas: int = 0
    quantidade_total_de_itens: int = 0


class Parametros(PixModel):
    """Echo of the filters applied to a list query."""

    inicio: Optional[str] = None
    fim: Optional[str] = None
    paginacao: Optional[Paginacao] = None


class ChargeList(PixModel):
    parametros: Optional[Parametros] = None
    cobs: list[Charge] = Field(default_factory=list)


class KeyList(PixModel):
    """Random (EVP) keys registered for the account."""

    chaves: list[str] = Field(default_factory=list)


class Webhook(PixModel):
    webhook_url: Optional[str] = None
    chave: Optional[str] = None
    criacao: Optional[str] = None


class WebhookList(PixModel):
    parametros: Optional[Parametros] = None
    webhooks: list[Webhook] = Field(default_factory=list)
