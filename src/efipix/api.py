"""Convenience facade bundling a session with every resource group."""

from __future__ import annotations

from typing import Any, Mapping, Union

from efipix.auth.session import EfiSession
from efipix.models import Credentials
from efipix.resources import ChargesResource, KeysResource, WebhooksResource


class EfiPix:
    """Entry point for applications using a single integration.

    Args:
        credentials: A configured :class:`~efipix.auth.EfiSession`, or the
            credentials to build one from.

    Example::

        pix = EfiPix(credentials_from_env())
        charge = pix.charges.create(Charge(valor=Valor(original="10.00")))
    """

    def __init__(self, credentials: Union[EfiSession, Credentials, Mapping[str, Any]]) -> None:
        self.session = (
            credentials if isinstance(credentials, EfiSession) else EfiSession(credentials)
        )
        self.charges = ChargesResource(self.session)
        self.keys = KeysResource(self.session)
        self.webhooks = WebhooksResource(self.session)
