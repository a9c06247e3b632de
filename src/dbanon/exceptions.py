"""
Custom exceptions for the database anonymizer.

Store-level failures are not exceptions: the gateway and engine report them
as typed results (see ``dbanon.engine.ErrorKind``). Exceptions are reserved
for problems detected before any database work starts.
"""


class AnonymizeError(Exception):
    """Base exception for all anonymizer errors."""
    pass


class ConfigError(AnonymizeError):
    """Raised for invalid or incomplete configuration."""
    pass
