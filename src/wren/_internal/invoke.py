"""Await-if-needed helper for user callables.

Checks, predicates and submit handlers may be plain functions or
coroutine functions. Callers invoke them directly and pass the result
through ``settle`` so the sync/async split lives in one place::

    error = await settle(rule.check(value))
"""

import inspect
from collections.abc import Awaitable


async def settle[T](result: T | Awaitable[T]) -> T:
    """Return *result*, awaiting it first when it is awaitable."""
    if inspect.isawaitable(result):
        return await result
    return result
