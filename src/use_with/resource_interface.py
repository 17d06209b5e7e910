"""Abstract interfaces for resources that know how to finalize themselves."""

from abc import ABC, abstractmethod


class Resource(ABC):
    """Abstract base class for synchronously finalized resources.

    Subclasses are finalized by the scope runners through ``close()`` and can
    also be used directly as context managers.
    """

    @abstractmethod
    def close(self) -> None:
        """Close the resource and release what it holds."""
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


class AsyncResource(ABC):
    """Abstract base class for resources finalized by awaiting ``aclose()``."""

    @abstractmethod
    async def aclose(self) -> None:
        """Close the resource and release what it holds."""
        pass

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
