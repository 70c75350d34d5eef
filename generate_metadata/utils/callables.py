"""
Helpers for user-supplied hooks that may be sync or async.
"""

import inspect
from collections.abc import Callable
from typing import Any


async def call_maybe_async(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call a sync or async callable and return its result."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result
