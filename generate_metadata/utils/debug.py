"""
Namespaced debug logging toggled by the client's ``debug`` flag.
"""

import logging
from collections.abc import Callable
from typing import Any

DebugFunction = Callable[..., None]

LOGGER_PREFIX = "generate_metadata"


def _noop(*args: Any, **kwargs: Any) -> None:
    return None


def create_debug(namespace: str, enabled: bool = False) -> DebugFunction:
    """
    Create a debug function for a namespace.

    When disabled a no-op is returned. When enabled, messages go to the
    ``generate_metadata.<namespace>`` logger at DEBUG level, using the usual
    ``%``-style lazy formatting.

    Args:
        namespace: Debug namespace, e.g. ``"resolver"``
        enabled: Whether debug output is enabled

    Returns:
        A callable accepting ``(msg, *args)``
    """
    if not enabled:
        return _noop

    logger = logging.getLogger(f"{LOGGER_PREFIX}.{namespace}")
    logger.setLevel(logging.DEBUG)

    def debug(msg: Any = "", *args: Any) -> None:
        logger.debug(str(msg), *args)

    return debug
