"""Scope runners: hand a resource to an operation, then finalize it."""

import inspect
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .config import UseWithConfig
from .finalizers import Finalizer
from .scope import AsyncResourceScope, ResourceScope

T = TypeVar("T")
U = TypeVar("U")


def run_with(
    resource: T,
    operation: Callable[[T], U],
    finalizer: Optional[Finalizer] = None,
    config: Optional[UseWithConfig] = None,
) -> U:
    """Run ``operation`` with ownership of ``resource`` and finalize it afterwards.

    The resource is finalized exactly once, after the operation returns or
    raises and before this function returns. Whatever the operation returns is
    returned unchanged; whatever it raises is re-raised unchanged.

    Args:
        resource: The resource, or an ``Owned`` handle wrapping it
        operation: Single-use callable consuming the resource
        finalizer: Explicit cleanup callable, called as ``finalizer(resource)``
        config: Configuration (defaults to the environment)

    Returns:
        The operation's result

    Raises:
        TypeError: If the operation returns an awaitable
    """
    with ResourceScope(resource, finalizer, config) as value:
        result = operation(value)
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise TypeError(
                "Operation returned an awaitable. Use run_with_async() so the "
                "resource outlives the asynchronous operation."
            )
        return result


async def run_with_async(
    resource: T,
    operation: Callable[[T], Awaitable[U]],
    finalizer: Optional[Finalizer] = None,
    config: Optional[UseWithConfig] = None,
) -> U:
    """Await ``operation(resource)`` and finalize the resource once it settles.

    Finalization happens only after the awaitable fully resolves, fails or is
    cancelled. No task is spawned; cancellation unwinds through the scope like
    any other exception.

    Args:
        resource: The resource, or an ``Owned`` handle wrapping it
        operation: Single-use callable returning an awaitable
        finalizer: Explicit cleanup callable, sync or async
        config: Configuration (defaults to the environment)

    Returns:
        The awaited result of the operation

    Raises:
        TypeError: If the operation does not return an awaitable
    """
    async with AsyncResourceScope(resource, finalizer, config) as value:
        pending: Any = operation(value)
        if not inspect.isawaitable(pending):
            raise TypeError(
                f"Operation returned {type(pending).__name__}, expected an awaitable. "
                f"Use run_with() for synchronous operations."
            )
        return await pending
