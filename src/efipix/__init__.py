"""efipix -- client library for the Efí PIX instant-payment API.

Every call to the PIX API runs over mutual TLS and carries an OAuth2 token
obtained with the client-credentials grant. This package manages that
authenticated session (certificate loading, token exchange, token caching)
and exposes the charge, key and webhook endpoints on top of it.

Typical usage::

    from efipix import Charge, EfiPix, Valor
    from efipix.config import credentials_from_env

    pix = EfiPix(credentials_from_env())
    charge = pix.charges.create(Charge(valor=Valor(original="10.00")))

Modules:
    auth: Session, token cache, claims decoder and certificate loader.
    client: Authorized request executor.
    resources: Charges, keys and webhooks.
    models: Pydantic models shared across the package.
    config: Environment hosts and credential loading.
    exceptions: Exception hierarchy.
    output: Optional Rich logging setup.
"""

from efipix.api import EfiPix
from efipix.auth import EfiSession
from efipix.models import (
    Calendario,
    Charge,
    Credentials,
    Devedor,
    ErrorDetail,
    Token,
    Valor,
    Webhook,
)

__version__ = "0.1.0"

__all__ = [
    "Calendario",
    "Charge",
    "Credentials",
    "Devedor",
    "EfiPix",
    "EfiSession",
    "ErrorDetail",
    "Token",
    "Valor",
    "Webhook",
]
