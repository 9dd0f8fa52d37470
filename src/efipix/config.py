"""Environment selection and credential loading.

This module holds everything that turns operator input into a
:class:`~efipix.models.Credentials` instance:

* **Environments** -- the two fixed API hosts and :func:`base_url_for`,
  which picks one from the ``sandbox`` flag.
* **Credential sources** -- :func:`resolve_credential` reads a secret from
  an environment variable (``env:VAR``), a file (``file:/path``) or takes
  the value literally.
* **Environment loading** -- :func:`credentials_from_env` builds a full
  credential set from ``EFI_*`` variables, for deployments configured
  through the process environment.

Validation of the resulting credentials (required fields, existing
certificate files) happens in :meth:`~efipix.auth.session.EfiSession.configure`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import ValidationError

from efipix.exceptions import ConfigError
from efipix.models import Credentials

PRODUCTION_URL = "https://pix.api.efipay.com.br"
"""Base URL of the production PIX API."""

SANDBOX_URL = "https://pix-h.api.efipay.com.br"
"""Base URL of the homologation (sandbox) PIX API."""

DEFAULT_TIMEOUT = 30
"""Request timeout, in seconds, used when ``EFI_TIMEOUT`` is not set."""

_TRUTHY = {"1", "true", "yes", "on"}


def base_url_for(sandbox: bool) -> str:
    """Return the API host for the selected environment."""
    return SANDBOX_URL if sandbox else PRODUCTION_URL


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - anything else -- used verbatim

    Args:
        source: The source descriptor string.

    Returns:
        The resolved credential string.

    Raises:
        ConfigError: If the variable is unset or the file cannot be read.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    return source


def credentials_from_env(
    prefix: str = "EFI_",
    environ: Optional[Mapping[str, str]] = None,
) -> Credentials:
    """Build :class:`~efipix.models.Credentials` from environment variables.

    Reads ``{prefix}CLIENT_ID``, ``{prefix}CLIENT_SECRET``,
    ``{prefix}CERT_PATH`` and ``{prefix}KEY_PATH`` (all required), plus
    ``{prefix}TIMEOUT`` (default :data:`DEFAULT_TIMEOUT`) and
    ``{prefix}SANDBOX`` (``1``/``true``/``yes``/``on`` enable it). The
    client id and secret may themselves be ``env:`` or ``file:`` source
    descriptors.

    Args:
        prefix: Variable name prefix.
        environ: Mapping to read from; defaults to :data:`os.environ`.

    Returns:
        The credential set. File existence is not checked here.

    Raises:
        ConfigError: If a required variable is missing or a value is invalid.
    """
    env = os.environ if environ is None else environ

    def _required(name: str) -> str:
        value = env.get(prefix + name, "")
        if not value:
            raise ConfigError(f"Environment variable '{prefix}{name}' is required")
        return value

    raw_timeout = env.get(prefix + "TIMEOUT") or str(DEFAULT_TIMEOUT)
    try:
        timeout = int(raw_timeout)
    except ValueError as exc:
        raise ConfigError(
            f"Environment variable '{prefix}TIMEOUT' must be an integer, got {raw_timeout!r}"
        ) from exc

    try:
        return Credentials(
            client_id=resolve_credential(_required("CLIENT_ID")),
            client_secret=resolve_credential(_required("CLIENT_SECRET")),
            timeout=timeout,
            sandbox=env.get(prefix + "SANDBOX", "").strip().lower() in _TRUTHY,
            ca_path=_required("CERT_PATH"),
            key_path=_required("KEY_PATH"),
        )
    except ValidationError as exc:
        raise ConfigError(describe_validation_error(exc)) from exc


def describe_validation_error(exc: ValidationError) -> str:
    """Summarise a :class:`~pydantic.ValidationError` on :class:`Credentials`.

    Field locations are reported with their Python names (``client_id``)
    even when the input used the camelCase aliases.
    """
    by_alias = {
        field.alias: name for name, field in Credentials.model_fields.items() if field.alias
    }
    problems = []
    for error in exc.errors():
        loc = error.get("loc") or ("credentials",)
        field = by_alias.get(str(loc[0]), str(loc[0]))
        if error.get("type") == "missing":
            problems.append(f"{field}: is required")
        else:
            problems.append(f"{field}: {error.get('msg')}")
    return "invalid credentials: " + "; ".join(problems)
