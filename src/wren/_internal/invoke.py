"""Invoke helpers — call sync or async hooks uniformly.

Controller hooks can be ``def`` or ``async def``. Any code that calls a
user-provided hook must handle both cases. This module keeps the
sync/async check in exactly one place.

Usage::

    from wren._internal.invoke import invoke

    result = await invoke(hook, context, request, response)
"""

import inspect
from typing import Any


async def invoke(hook: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a hook and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: returns immediately
        def change_variations(context, request, response):
            context.specific["title"] = "Home"

        # async: returns a coroutine, awaited here
        async def change_variations(context, request, response):
            context.specific["items"] = await fetch_items()
    """
    result = hook(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
