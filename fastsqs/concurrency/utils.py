"""Concurrency utilities."""

import inspect
from typing import Any


def is_async_callable(callable_object: Any) -> bool:
    """Tells whether calling the object returns an awaitable.

    Async callable instances (objects with an `async def __call__`) count too.
    """
    if inspect.iscoroutinefunction(callable_object):
        return True

    call = getattr(callable_object, "__call__", None)
    return inspect.iscoroutinefunction(call)


def ensure_message_handler(callable_object: Any) -> None:
    """Ensures that the object can be used as a message handler.

    Args:
        callable_object: The handler to check.
    """
    if not callable(callable_object):
        raise TypeError(f"The message handler must be callable but it is {callable_object!r}.")

    if inspect.isclass(callable_object):
        raise TypeError(f"The message handler must be a function, not the class {callable_object}.")
