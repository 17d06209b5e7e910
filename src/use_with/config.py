"""Configuration management for use_with."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv

PACKAGE_LOGGER = "use_with"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _split_names(raw: str) -> Tuple[str, ...]:
    return tuple(name.strip() for name in raw.split(",") if name.strip())


@lru_cache(maxsize=None)
def _load_env_file() -> bool:
    """Load environment variables from .env file, once per process."""
    return load_dotenv()


@dataclass
class UseWithConfig:
    """Scope runner configuration parameters."""

    strict: bool = False
    finalizer_names: Tuple[str, ...] = ("close",)
    async_finalizer_names: Tuple[str, ...] = ("aclose",)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "UseWithConfig":
        """Load configuration from environment variables.

        - USE_WITH_STRICT=true rejects resources without a finalizer
        - USE_WITH_FINALIZER_NAMES / USE_WITH_ASYNC_FINALIZER_NAMES are
          comma-separated method names tried in order
        - USE_WITH_LOG_LEVEL sets the level used by setup_logging()
        """
        return cls(
            strict=os.getenv("USE_WITH_STRICT", "false").lower() == "true",
            finalizer_names=_split_names(os.getenv("USE_WITH_FINALIZER_NAMES", "close")),
            async_finalizer_names=_split_names(
                os.getenv("USE_WITH_ASYNC_FINALIZER_NAMES", "aclose")
            ),
            log_level=os.getenv("USE_WITH_LOG_LEVEL", "WARNING").upper(),
        )

    def __post_init__(self):
        """Validate configuration after initialization.

        The log level is checked by setup_logging(), its only consumer.
        """
        if not self.finalizer_names:
            raise ValueError("finalizer_names must not be empty")
        if not self.async_finalizer_names:
            raise ValueError("async_finalizer_names must not be empty")


def get_config() -> UseWithConfig:
    """Get use_with configuration."""
    _load_env_file()
    return UseWithConfig.from_env()


def setup_logging(verbose: bool = False, config: Optional[UseWithConfig] = None):
    """Configure the use_with logger level.

    Args:
        verbose: Enable verbose logging
        config: Configuration to take the level from (defaults to the environment)

    Raises:
        ValueError: If the configured log level is unknown
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if verbose:
        logger.setLevel(logging.DEBUG)
        return

    level = (config or get_config()).log_level
    if level not in _LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level}. Valid options: {', '.join(_LOG_LEVELS)}")
    logger.setLevel(level)
