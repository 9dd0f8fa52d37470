"""PIX resource groups built on an :class:`~efipix.auth.EfiSession`.

- :class:`ChargesResource` -- immediate charges (``/v2/cob``).
- :class:`KeysResource` -- random keys (``/v2/gn/evp``).
- :class:`WebhooksResource` -- webhooks (``/v2/webhook``).

Failed calls raise :class:`~efipix.exceptions.ProviderError`, whose
``detail`` attribute holds the provider's diagnostics for every resource.
"""

from efipix.resources.charges import ChargesResource
from efipix.resources.keys import KeysResource
from efipix.resources.webhooks import WebhooksResource

__all__ = ["ChargesResource", "KeysResource", "WebhooksResource"]
