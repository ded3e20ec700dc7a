"""
Launcher error types.

Every failure in the launch pipeline is one of these. Nothing in the
core recovers from them locally: they abort the current pass and reach
the caller, who must treat any error as "no plan produced".
"""


class LauncherError(Exception):
    """Base error for the feature launcher."""


class ResolutionError(LauncherError):
    """Raised when an artifact coordinate or location cannot be resolved."""


class ParseError(LauncherError):
    """Raised when a feature document or an extension payload is malformed."""


class VariableError(ParseError):
    """Raised when a placeholder references a variable that has no value."""


class PolicyError(LauncherError):
    """Raised when the startup mode forbids something the feature asks for."""


class UnknownExtensionError(LauncherError):
    """Raised when a required extension has no handler."""


class PersistenceError(LauncherError):
    """Raised when the cached application descriptor cannot be written."""
