"""One-shot ownership transfer.

Python cannot stop a caller from keeping a reference to a resource after
handing it to a scope runner. Wrapping the resource in ``Owned`` turns a
second use of the same handle into an immediate ``ResourceConsumedError``.
"""

import logging
from typing import Any, Generic, TypeVar

from .exceptions import ResourceConsumedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TAKEN = object()


class Owned(Generic[T]):
    """A resource handle that can be taken exactly once."""

    __slots__ = ("_value", "_type_name")

    def __init__(self, value: T):
        self._value: Any = value
        self._type_name = type(value).__name__

    @property
    def consumed(self) -> bool:
        """Whether ownership has already been transferred out of this handle."""
        return self._value is _TAKEN

    def peek(self) -> T:
        """Return the wrapped value without transferring ownership.

        Raises:
            ResourceConsumedError: If the value was already taken
        """
        if self._value is _TAKEN:
            raise ResourceConsumedError(
                f"{self._type_name} resource was already consumed by a previous scope"
            )
        return self._value

    def take(self) -> T:
        """Transfer ownership of the wrapped value to the caller.

        Raises:
            ResourceConsumedError: If the value was already taken
        """
        value, self._value = self.peek(), _TAKEN
        logger.debug(f"Ownership of {self._type_name} resource transferred")
        return value

    def __repr__(self) -> str:
        state = "consumed" if self.consumed else "owned"
        return f"Owned({self._type_name}, {state})"


def claim(resource: Any) -> Any:
    """Take ownership of a resource handed to a scope runner.

    ``Owned`` handles are unwrapped (failing fast if already consumed); any
    other value is passed through as-is.
    """
    if isinstance(resource, Owned):
        return resource.take()
    return resource
