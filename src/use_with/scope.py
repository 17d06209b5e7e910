"""Context managers that own a resource for the length of a block.

``with using(resource) as it:`` is the inline-block form of ``run_with``:
the resource is bound to ``it`` for the block and finalized exactly once
when the block exits, however it exits.
"""

import logging
from typing import Any, Callable, Generic, Optional, TypeVar

from .config import UseWithConfig
from .finalizers import Cleanup, Finalizer, resolve_async_finalizer, resolve_finalizer
from .ownership import Owned, claim

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _ScopeState(Generic[T]):
    """Ownership bookkeeping shared by the sync and async scopes."""

    def __init__(
        self,
        resource: Any,
        resolve: Callable[..., Cleanup],
        finalizer: Optional[Finalizer],
        config: Optional[UseWithConfig],
    ):
        # Resolve before taking ownership so a rejected resource stays with its owner
        value = resource.peek() if isinstance(resource, Owned) else resource
        self._cleanup = resolve(value, finalizer, config)
        self._resource: Optional[T] = claim(resource)
        self._name = type(self._resource).__name__
        self._entered = False
        self._released = False

    @property
    def released(self) -> bool:
        """Whether the resource has been finalized."""
        return self._released

    def _begin_enter(self) -> None:
        if self._entered:
            raise RuntimeError(f"{self._name} scope already entered. Scopes are single-use.")
        self._entered = True
        logger.debug(f"Entered scope for {self._name} resource")

    def _abandon(self, exc: BaseException) -> None:
        # A context manager whose __enter__ failed is not exited, as with the with statement
        logger.debug(f"{type(exc).__name__} while entering {self._name} resource")
        self._released = True
        self._resource = None

    def _begin_release(self, exc: Optional[BaseException]) -> bool:
        if self._released:
            return False
        self._released = True
        if exc is not None:
            logger.debug(f"{type(exc).__name__} unwinding through {self._name} scope")
        return True

    def _end_release(self) -> None:
        self._resource = None
        logger.debug(f"Released {self._name} resource")


class ResourceScope(_ScopeState[T]):
    """Synchronous scope owning a single resource.

    The finalizer is resolved when the scope is created, so a resource that
    cannot be finalized is rejected (in strict mode) before any work runs.
    Context-manager resources are entered with the scope. Exceptions leaving
    the block are never suppressed.
    """

    def __init__(
        self,
        resource: Any,
        finalizer: Optional[Finalizer] = None,
        config: Optional[UseWithConfig] = None,
    ):
        """Take ownership of a resource.

        Args:
            resource: The resource, or an ``Owned`` handle wrapping it
            finalizer: Explicit cleanup callable, called as ``finalizer(resource)``
            config: Configuration (defaults to the environment)
        """
        super().__init__(resource, resolve_finalizer, finalizer, config)

    def release(self, exc: Optional[BaseException] = None) -> None:
        """Finalize the resource now. Later calls are no-ops."""
        if not self._begin_release(exc):
            return
        try:
            self._cleanup.release(exc)
        finally:
            self._end_release()

    def __enter__(self) -> T:
        self._begin_enter()
        resource = self._resource
        if self._cleanup.enter is not None:
            try:
                self._cleanup.enter()
            except BaseException as exc:
                self._abandon(exc)
                raise
        return resource

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.release(exc_val)
        return False


class AsyncResourceScope(_ScopeState[T]):
    """Asynchronous scope owning a single resource.

    The resource stays referenced by the scope across every suspension point
    of the block and is finalized when the block completes, fails or is
    cancelled.
    """

    def __init__(
        self,
        resource: Any,
        finalizer: Optional[Finalizer] = None,
        config: Optional[UseWithConfig] = None,
    ):
        super().__init__(resource, resolve_async_finalizer, finalizer, config)

    async def release(self, exc: Optional[BaseException] = None) -> None:
        """Finalize the resource now. Later calls are no-ops."""
        if not self._begin_release(exc):
            return
        try:
            await self._cleanup.release(exc)
        finally:
            self._end_release()

    async def __aenter__(self) -> T:
        self._begin_enter()
        resource = self._resource
        if self._cleanup.enter is not None:
            try:
                await self._cleanup.enter()
            except BaseException as exc:
                self._abandon(exc)
                raise
        return resource

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.release(exc_val)
        return False


def using(
    resource: Any,
    finalizer: Optional[Finalizer] = None,
    config: Optional[UseWithConfig] = None,
) -> ResourceScope:
    """Bind a resource for the following ``with`` block."""
    return ResourceScope(resource, finalizer, config)


def async_using(
    resource: Any,
    finalizer: Optional[Finalizer] = None,
    config: Optional[UseWithConfig] = None,
) -> AsyncResourceScope:
    """Bind a resource for the following ``async with`` block."""
    return AsyncResourceScope(resource, finalizer, config)
