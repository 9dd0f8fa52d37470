"""HTTP client module for efipix.

Provides :class:`PixClient`, the blocking executor that resource
operations use to send authorized requests over the session's
mutually-authenticated transport.

Example::

    from efipix.client import PixClient

    with PixClient(session) as client:
        charge = client.get("/v2/cob/7978c0c97ea847e78e8849634473c1f1")
"""

from efipix.client.sync_client import PixClient

__all__ = ["PixClient"]
