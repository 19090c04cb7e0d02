"""Invoke helpers: call sync or async callables uniformly.

Middleware, route handlers and error stages can be ``def`` or
``async def``. The sync/async check lives here and nowhere else.

Usage::

    from sparrow._internal.invoke import invoke

    step = await invoke(middleware, request)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable.

    Works with both sync and async callables::

        def first(request):
            logger.info("First Middleware")

        async def parse(request):
            raw = await request.raw_body()
            ...
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
