"""Exceptions raised by use_with itself.

Failures raised by a caller's operation are never wrapped in these types;
they propagate unchanged.
"""


class UseWithError(Exception):
    """Base class for use_with errors."""


class ResourceConsumedError(UseWithError):
    """Raised when an owned resource is claimed after ownership was transferred."""


class MissingFinalizerError(UseWithError, TypeError):
    """Raised in strict mode when a resource has no way to be finalized."""
