"""Bridges between callback-style and awaitable-style calls.

Service methods and hooks may report completion by returning a value, by
returning an awaitable, or by calling ``callback(error, result)``. Each call
is normalized into one :class:`Outcome`, which honours only its first
settlement.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from hookline.errors import HookError


def _as_exception(error: Any) -> BaseException:
    if isinstance(error, BaseException):
        return error
    return HookError(str(error))


class Outcome:
    """A result or an error, settled at most once."""

    def __init__(self) -> None:
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()

    @property
    def settled(self) -> bool:
        return self._future.done()

    def settle(self, error: Any = None, result: Any = None) -> None:
        """Node-style completion callback. Later settlements are ignored."""
        if self._future.done():
            return
        if error is not None:
            self._future.set_exception(_as_exception(error))
        else:
            self._future.set_result(result)

    async def follow(self, awaitable: Awaitable[Any]) -> None:
        """Settle with the outcome of ``awaitable``."""
        try:
            value = await awaitable
        except Exception as e:
            self.settle(e)
        else:
            self.settle(None, value)

    async def wait(self, returned: Any = None) -> Any:
        """Wait for the first settlement.

        An awaitable ``returned`` competes with the callback. It is discarded
        when the callback has already settled, and cancelled when the callback
        settles while it is still pending.
        """
        if not inspect.isawaitable(returned):
            return await self._future
        if self.settled:
            if inspect.iscoroutine(returned):
                returned.close()
            return await self._future

        follower = asyncio.ensure_future(self.follow(returned))
        try:
            return await self._future
        finally:
            if not follower.done():
                follower.cancel()

    def __await__(self):
        return self._future.__await__()


def accepts_callback(fn: Callable) -> bool:
    """True when ``fn`` declares a ``callback`` parameter."""
    try:
        return "callback" in inspect.signature(fn).parameters
    except (TypeError, ValueError):
        return False


def takes_next(fn: Callable) -> bool:
    """True when ``fn`` is a ``(context, next)`` style hook."""
    try:
        parameters = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return False
    positional = [
        p
        for p in parameters
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
    ]
    return len(positional) >= 2


async def call_method(fn: Callable, args: list[Any], uses_callback: bool) -> Any:
    """Invoke an original service method and wait for its outcome.

    Args:
        fn: The method as it was before hooks were installed
        args: Positional arguments in verb order
        uses_callback: Whether to pass a completion ``callback`` keyword

    Returns:
        The result the method reported first, by callback or return value
    """
    outcome = Outcome()
    kwargs = {"callback": outcome.settle} if uses_callback else {}

    try:
        returned = fn(*args, **kwargs)
    except Exception as e:
        outcome.settle(e)
        returned = None
    else:
        if not inspect.isawaitable(returned) and (not uses_callback or returned is not None):
            outcome.settle(None, returned)

    return await outcome.wait(returned)


async def call_hook(fn: Callable, context: Any) -> Any:
    """Invoke one hook function and wait for the value it produced.

    A ``(context, next)`` hook finishes when it calls ``next``, when the
    awaitable it returns settles, or when it returns a value other than None.
    """
    if not takes_next(fn):
        value = fn(context)
        if inspect.isawaitable(value):
            value = await value
        return value

    outcome = Outcome()
    returned = fn(context, outcome.settle)
    if returned is not None and not inspect.isawaitable(returned):
        outcome.settle(None, returned)
    return await outcome.wait(returned)
