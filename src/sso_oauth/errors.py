"""
Error types raised by the SSO OAuth plugin.

Every failure is terminal for the current login attempt; nothing here is retried.
"""


class SSOError(Exception):
    """Base class for plugin errors."""


class ConfigError(SSOError):
    """Raised when provider settings are missing or invalid; the provider is disabled."""


class ParseError(SSOError):
    """Raised when the provider's user-info response cannot be turned into a profile."""


class LoginError(SSOError):
    """Raised when an account cannot be resolved, created or linked."""
