"""Helpers for calling user supplied callables from async pipeline code."""

from __future__ import annotations

from collections.abc import Callable
import functools
import inspect
from typing import Any

from starlette.concurrency import run_in_threadpool


def is_async_callable(fn: Any) -> bool:
    """Return whether calling *fn* produces an awaitable."""
    while isinstance(fn, functools.partial):
        fn = fn.func
    return inspect.iscoroutinefunction(fn) or (
        callable(fn) and inspect.iscoroutinefunction(getattr(fn, "__call__", None))
    )


async def call(fn: Callable[..., Any], *args: Any) -> Any:
    """Await *fn* when it is async, otherwise run it in the threadpool."""
    if is_async_callable(fn):
        return await fn(*args)
    return await run_in_threadpool(fn, *args)
