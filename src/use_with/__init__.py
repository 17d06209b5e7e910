"""use_with - run an operation on a resource and finalize it exactly once."""

__version__ = "0.1.0"

from .config import UseWithConfig, get_config, setup_logging
from .exceptions import MissingFinalizerError, ResourceConsumedError, UseWithError
from .mixins import Use
from .ownership import Owned, claim
from .resource_interface import AsyncResource, Resource
from .runner import run_with, run_with_async
from .scope import AsyncResourceScope, ResourceScope, async_using, using

__all__ = [
    "AsyncResource",
    "AsyncResourceScope",
    "MissingFinalizerError",
    "Owned",
    "Resource",
    "ResourceConsumedError",
    "ResourceScope",
    "Use",
    "UseWithConfig",
    "UseWithError",
    "async_using",
    "claim",
    "get_config",
    "run_with",
    "run_with_async",
    "setup_logging",
    "using",
]
