"""Version information for wtree."""

__version__ = "1.0.0"
