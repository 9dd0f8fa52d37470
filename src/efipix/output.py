"""Diagnostic output for applications embedding efipix.

Every efipix module logs through :func:`logging.getLogger` under the
``efipix`` namespace and never installs handlers on import, so a host
application's logging configuration is left untouched.

For scripts and notebooks that just want to see what the session is doing,
:func:`configure_logging` attaches a Rich handler writing to **stderr**
(stdout stays free for data), following `clig.dev <https://clig.dev/>`_
colour conventions: ``NO_COLOR`` and ``TERM=dumb`` disable colour.

Secrets never reach the log: client secrets and token values are not
passed to any logger call.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "efipix"

_handler: Optional[logging.Handler] = None


def configure_logging(verbose: bool = False, no_color: bool = False) -> logging.Logger:
    """Send efipix diagnostics to stderr through Rich.

    Calling it again replaces the handler installed by the previous call.

    Args:
        verbose: Log at ``DEBUG`` (token exchanges, certificate loads)
            instead of ``WARNING``.
        no_color: Disable colour and markup regardless of the environment.

    Returns:
        The ``efipix`` logger.
    """
    global _handler

    logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)

    console = Console(
        file=sys.stderr,
        stderr=True,
        no_color=no_color or _should_disable_color(),
    )
    _handler = RichHandler(
        console=console,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )
    logger.addHandler(_handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger


def reset_logging() -> None:
    """Remove the handler installed by :func:`configure_logging`, if any."""
    global _handler

    if _handler is not None:
        logger = logging.getLogger(LOGGER_NAME)
        logger.removeHandler(_handler)
        logger.setLevel(logging.NOTSET)
        _handler = None


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False
