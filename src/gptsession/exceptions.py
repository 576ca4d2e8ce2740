# src/gptsession/exceptions.py
"""
Custom exceptions for the gptsession library.

This module defines a hierarchy of exception classes so that applications
can tell configuration problems, session history problems and request
failures apart. Request-level errors are never raised out of
``Request.run()``; they are converted into failure responses there.
"""

from typing import Optional


class GPTSessionError(Exception):
    """Base class for all gptsession specific errors."""
    def __init__(self, message: str = "An unspecified error occurred in gptsession."):
        super().__init__(message)


class ConfigError(GPTSessionError):
    """Raised for errors related to configuration discovery, loading or validation."""
    def __init__(self, message: str = "Configuration error."):
        super().__init__(message)


class SessionError(GPTSessionError):
    """Base class for errors related to session history handling."""
    def __init__(self, message: str = "Session error."):
        super().__init__(message)


class ParseError(SessionError):
    """Raised when a line of a history file is not a valid JSON record."""
    def __init__(self, path: str = "", line_number: int = 0, message: str = "Invalid JSON record."):
        self.path = path
        self.line_number = line_number
        super().__init__(f"{message} File: '{path}', line {line_number}.")


class SessionFileNotFoundError(SessionError):
    """Raised when a history file to load does not exist."""
    def __init__(self, path: str = "", message: str = "History file not found."):
        self.path = path
        super().__init__(f"{message} Path: '{path}'")


class SessionSyncError(SessionError):
    """
    Raised when appending a record to the auto-sync file fails.
    The in-memory history already holds the record when this is raised.
    """
    def __init__(self, path: str = "", message: str = "Failed to sync history."):
        self.path = path
        super().__init__(f"{message} Path: '{path}'")


class RequestError(GPTSessionError):
    """Base class for errors raised while performing a completion request."""
    def __init__(self, message: str = "Request error."):
        super().__init__(message)


class NotPreparedError(RequestError):
    """Raised when a request is run without a prepared payload."""
    def __init__(self, message: str = "ERROR: request not prepared"):
        super().__init__(message)


class TransportError(RequestError):
    """Raised when the completion endpoint answers with a non-success status."""
    def __init__(self, status_code: int = 0, reason: Optional[str] = None):
        self.status_code = status_code
        self.reason = reason or "Unknown"
        super().__init__(f"Error: {self.reason}")


class ExchangeError(RequestError):
    """Raised for failures while talking to the endpoint or decoding its answer."""
    def __init__(self, message: str = "Exchange failed."):
        super().__init__(message)
