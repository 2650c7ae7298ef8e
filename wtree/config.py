"""Configuration handling for wtree"""

from dataclasses import dataclass
from typing import Optional

from wtree.constants import DEFAULT_REMOTE


@dataclass
class Config:
    """Configuration for wtree with validation."""

    remote_name: str = DEFAULT_REMOTE

    # Time limits in seconds (None = wait forever)
    backend_timeout: Optional[float] = 300.0
    init_timeout: Optional[float] = 600.0
    lock_timeout: float = 10.0

    # Execution modes
    interactive: bool = True
    force: bool = False
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_remote_name()
        self._validate_timeout("backend_timeout")
        self._validate_timeout("init_timeout")
        self._validate_lock_timeout()

    def _validate_remote_name(self):
        """Validate remote_name is not empty."""
        if not self.remote_name or not self.remote_name.strip():
            raise ValueError("remote_name cannot be empty")
        self.remote_name = self.remote_name.strip()

    def _validate_timeout(self, name: str):
        """Validate an optional timeout is positive."""
        value = getattr(self, name)
        if value is not None and value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")

    def _validate_lock_timeout(self):
        """Validate lock_timeout is not negative."""
        if self.lock_timeout < 0:
            raise ValueError(f"lock_timeout cannot be negative, got {self.lock_timeout}")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "remote_name": self.remote_name,
            "backend_timeout": self.backend_timeout,
            "init_timeout": self.init_timeout,
            "lock_timeout": self.lock_timeout,
            "interactive": self.interactive,
            "force": self.force,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        # Extract only known fields
        known_fields = {
            "remote_name",
            "backend_timeout",
            "init_timeout",
            "lock_timeout",
            "interactive",
            "force",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
