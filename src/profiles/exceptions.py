"""Profile engine exceptions for EVE Settings Manager.

These never cross the public operations of the engine; they are raised
by helpers and converted into result values carrying a Reason.
"""

from src.profiles.models import Reason


class ProfileError(Exception):
    """Base exception for profile engine errors."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class TransferDocumentError(ProfileError):
    """A link transfer document could not be read or parsed."""

    def __init__(self, reason: Reason, original_error: Exception = None):
        self.reason = reason
        message = f"Invalid link transfer document ({reason.value})"
        super().__init__(message, original_error)


class SettingsFileError(ProfileError):
    """Reading or writing a settings blob failed."""

    def __init__(self, path: str, operation: str, original_error: Exception = None):
        self.path = path
        self.operation = operation
        message = f"Failed to {operation} '{path}'"
        super().__init__(message, original_error)
