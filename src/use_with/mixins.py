"""Method form of the scope runners."""

from typing import Awaitable, Callable, Optional, TypeVar

from .config import UseWithConfig
from .finalizers import Finalizer
from .runner import run_with, run_with_async

U = TypeVar("U")


class Use:
    """Mixin giving a resource class ``use_with`` and ``use_with_async`` methods.

    Example:
        class Connection(Use):
            def close(self): ...

        rows = Connection().use_with(lambda conn: conn.fetch())
    """

    def use_with(
        self,
        operation: Callable[..., U],
        finalizer: Optional[Finalizer] = None,
        config: Optional[UseWithConfig] = None,
    ) -> U:
        """Consume this resource with ``operation``; see ``run_with``."""
        return run_with(self, operation, finalizer, config)

    async def use_with_async(
        self,
        operation: Callable[..., Awaitable[U]],
        finalizer: Optional[Finalizer] = None,
        config: Optional[UseWithConfig] = None,
    ) -> U:
        """Consume this resource with an async ``operation``; see ``run_with_async``."""
        return await run_with_async(self, operation, finalizer, config)
