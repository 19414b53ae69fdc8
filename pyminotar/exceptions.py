# pyminotar/exceptions.py
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    UNSUPPORTED_FORMAT = "unsupported_format"
    INVALID_DIMENSIONS = "invalid_dimensions"
    DERIVATION_FAILED = "derivation_failed"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    NOT_FOUND = "not_found"
    CONFIG = "config"


class MinotarError(Exception):
    """
    Base exception for all PyMinotar errors.

    Carries an ErrorKind so the HTTP layer and the logs can tell failures
    apart without matching on message text.
    """
    kind = ErrorKind.DERIVATION_FAILED

    def __init__(self, message: str, kind: Optional[ErrorKind] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Structured form for logging."""
        return {
            "error": self.__class__.__name__,
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
        }


# --- Image errors ---

class DecodeError(MinotarError):
    """Raised when bytes are not a supported skin image."""
    kind = ErrorKind.UNSUPPORTED_FORMAT

class InvalidDimensionsError(MinotarError):
    """Raised when a resize targets a zero or negative dimension."""
    kind = ErrorKind.INVALID_DIMENSIONS

class DerivationFailedError(MinotarError):
    """Raised when a view could not be derived from a resolved skin."""
    kind = ErrorKind.DERIVATION_FAILED


# --- Remote collaborator errors ---

class RemoteError(MinotarError):
    """Base exception for skin store and identity lookup failures."""
    kind = ErrorKind.REMOTE_UNAVAILABLE

class RemoteUnavailable(RemoteError):
    """Raised when a remote service could not be reached or answered badly."""

class SkinNotFound(RemoteError):
    """Raised when the skin store has no skin for an identifier."""
    kind = ErrorKind.NOT_FOUND

class UserNotFound(RemoteError):
    """Raised when no account exists for a name."""
    kind = ErrorKind.NOT_FOUND


# --- Configuration errors ---

class ConfigLoadError(MinotarError):
    """Raised when config.json exists but cannot be parsed."""
    kind = ErrorKind.CONFIG
