from __future__ import annotations


class MinikubeError(Exception):
    """Base exception for this project."""


class ConfigError(MinikubeError):
    """Raised when configuration is invalid, unreadable or incomplete."""

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class WhitelistError(ConfigError):
    """A whitelisted flag name has no registered flag behind it."""


class ProvisionError(MinikubeError):
    """Raised when a required directory cannot be created."""
