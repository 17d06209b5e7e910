"""Finalizer resolution for scoped resources.

A finalizer is the cleanup step a scope runs exactly once when it exits. The
resolved release callables take the exception unwinding through the scope (or
None) so that context-manager resources see the same arguments a ``with``
block would give them. Context-manager resources are also entered when the
scope is entered, so their setup and teardown stay paired.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from .config import UseWithConfig, get_config
from .exceptions import MissingFinalizerError

logger = logging.getLogger(__name__)

Finalizer = Callable[[Any], Any]
Release = Callable[[Optional[BaseException]], Any]
AsyncRelease = Callable[[Optional[BaseException]], Awaitable[None]]


@dataclass
class Cleanup:
    """Steps a scope runs around the operation.

    ``enter`` is only set for context-manager resources; its result is
    discarded. ``release`` runs once when the scope exits.
    """

    release: Callable[[Optional[BaseException]], Any]
    enter: Optional[Callable[[], Any]] = None


def _exc_info(exc: Optional[BaseException]):
    if exc is None:
        return None, None, None
    return type(exc), exc, exc.__traceback__


def _describe(resource: Any) -> str:
    return type(resource).__name__


def _find_method(resource: Any, names) -> Optional[Callable[[], Any]]:
    for name in names:
        method = getattr(resource, name, None)
        if callable(method):
            logger.debug(f"Resolved {_describe(resource)}.{name}() as finalizer")
            return method
    return None


def _context_manager(resource: Any, enter_name: str, exit_name: str) -> Optional[Cleanup]:
    # Special methods are looked up on the type, as the with statement does.
    # The exit return value is dropped so a resource can never suppress a failure.
    enter_method = getattr(type(resource), enter_name, None)
    exit_method = getattr(type(resource), exit_name, None)
    if enter_method is None or exit_method is None:
        return None
    logger.debug(f"Resolved {_describe(resource)}.{exit_name}() as finalizer")
    return Cleanup(
        release=lambda exc: exit_method(resource, *_exc_info(exc)),
        enter=lambda: enter_method(resource),
    )


def _lookup_sync(
    resource: Any, finalizer: Optional[Finalizer], config: UseWithConfig
) -> Optional[Cleanup]:
    """Find a synchronous cleanup step; its results may still be awaitable."""
    if finalizer is not None:
        return Cleanup(release=lambda exc: finalizer(resource))

    method = _find_method(resource, config.finalizer_names)
    if method is not None:
        return Cleanup(release=lambda exc: method())

    return _context_manager(resource, "__enter__", "__exit__")


def _missing(resource: Any, config: UseWithConfig) -> Cleanup:
    if config.strict:
        logger.error(f"No finalizer found for {_describe(resource)} resource")
        raise MissingFinalizerError(
            f"{_describe(resource)} has no finalizer. Pass finalizer= or implement "
            f"one of: {', '.join(config.finalizer_names)}"
        )
    logger.debug(f"{_describe(resource)} has no finalizer, dropping reference only")
    return Cleanup(release=_drop_reference)


def _drop_reference(exc: Optional[BaseException]) -> None:
    return None


def _reject_awaitable(result: Any, resource: Any) -> None:
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise TypeError(
            f"Finalizer for {_describe(resource)} returned an awaitable. "
            f"Use run_with_async() for asynchronous resources."
        )


def resolve_finalizer(
    resource: Any,
    finalizer: Optional[Finalizer] = None,
    config: Optional[UseWithConfig] = None,
) -> Cleanup:
    """Resolve the cleanup steps for a synchronous scope.

    Args:
        resource: The resource being scoped
        finalizer: Explicit cleanup callable, called as ``finalizer(resource)``
        config: Configuration (defaults to the environment)

    Returns:
        Cleanup whose ``release`` takes the in-flight exception (or None)

    Raises:
        MissingFinalizerError: In strict mode, when nothing can finalize the resource
    """
    config = config or get_config()
    cleanup = _lookup_sync(resource, finalizer, config)
    if cleanup is None:
        return _missing(resource, config)

    release = cleanup.release
    enter = cleanup.enter

    def release_sync(exc: Optional[BaseException]) -> None:
        _reject_awaitable(release(exc), resource)

    def enter_sync() -> None:
        _reject_awaitable(enter(), resource)

    return Cleanup(release=release_sync, enter=enter_sync if enter is not None else None)


def resolve_async_finalizer(
    resource: Any,
    finalizer: Optional[Finalizer] = None,
    config: Optional[UseWithConfig] = None,
) -> Cleanup:
    """Resolve the cleanup steps for an asynchronous scope.

    Asynchronous cleanup (``aclose()``, ``__aenter__``/``__aexit__``) wins over
    synchronous cleanup. Any step that returns an awaitable is awaited.

    Args:
        resource: The resource being scoped
        finalizer: Explicit cleanup callable, sync or async
        config: Configuration (defaults to the environment)

    Returns:
        Cleanup whose ``release`` and ``enter`` are coroutine functions

    Raises:
        MissingFinalizerError: In strict mode, when nothing can finalize the resource
    """
    config = config or get_config()
    cleanup: Optional[Cleanup] = None

    if finalizer is None:
        method = _find_method(resource, config.async_finalizer_names)
        if method is not None:
            cleanup = Cleanup(release=lambda exc: method())
        else:
            cleanup = _context_manager(resource, "__aenter__", "__aexit__")

    if cleanup is None:
        cleanup = _lookup_sync(resource, finalizer, config)
    if cleanup is None:
        cleanup = _missing(resource, config)

    release = cleanup.release
    enter = cleanup.enter

    async def release_async(exc: Optional[BaseException]) -> None:
        result = release(exc)
        if inspect.isawaitable(result):
            await result

    async def enter_async() -> None:
        result = enter()
        if inspect.isawaitable(result):
            await result

    return Cleanup(release=release_async, enter=enter_async if enter is not None else None)
