"""Session discovery and transcript reconstruction for the coding-assistant chat."""

__version__ = "0.1.0"
