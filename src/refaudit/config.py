"""Configuration management for refaudit.

Loads environment variables and provides centralized config access.
"""
import os
from dotenv import find_dotenv, load_dotenv

# Version - bump together with pyproject.toml
__version__ = "1.0.0"


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self):
        """Initialize config by loading the nearest .env file."""
        # Search upward from the working directory, not from the installed package
        load_dotenv(find_dotenv(usecwd=True))

        self._validate()

    def _validate(self):
        """Validate tunables eagerly so a bad value fails before any walking.

        Raises:
            ValueError: If REFAUDIT_QUEUE_SIZE or REFAUDIT_POLL_INTERVAL is invalid
        """
        if self.queue_size < 1:
            raise ValueError(
                f"REFAUDIT_QUEUE_SIZE must be at least 1, got {self.queue_size}"
            )
        if self.poll_interval <= 0:
            raise ValueError(
                f"REFAUDIT_POLL_INTERVAL must be positive, got {self.poll_interval}"
            )

    @property
    def queue_size(self) -> int:
        """Capacity of the bounded queue between the walker and the parser.

        Returns:
            Queue capacity (default 4)
        """
        raw = os.getenv("REFAUDIT_QUEUE_SIZE", "4")
        try:
            return int(raw)
        except ValueError:
            raise ValueError(
                f"REFAUDIT_QUEUE_SIZE must be an integer, got {raw!r}"
            ) from None

    @property
    def poll_interval(self) -> float:
        """Seconds a blocked queue operation waits before re-checking cancellation.

        Returns:
            Poll interval in seconds (default 0.05)
        """
        raw = os.getenv("REFAUDIT_POLL_INTERVAL", "0.05")
        try:
            return float(raw)
        except ValueError:
            raise ValueError(
                f"REFAUDIT_POLL_INTERVAL must be a number, got {raw!r}"
            ) from None


# Singleton instance
_config = None


def get_config() -> Config:
    """Get or create singleton Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config():
    """Drop the cached instance so the environment is read again."""
    global _config
    _config = None
