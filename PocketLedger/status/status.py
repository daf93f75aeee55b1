"""Status definitions and exceptions for PocketLedger.

This module provides:
    - Status: enumeration of possible application states
    - STATUS_MESSAGE: user-facing messages for each status
    - get_message: retrieve the message for a status
    - BaseStatusException: base exception carrying a Status
    - Specific exceptions (e.g., UserExistsException) for error handling in services
"""
import enum
import logging
from typing import Dict


class Status(enum.StrEnum):
    """Enumeration of application status codes."""
    UnknownStatus = enum.auto()
    Okay = enum.auto()

    # Settings status
    SettingsNotFound = enum.auto()
    SettingsInvalid = enum.auto()

    # Authentication status
    UserExists = enum.auto()
    InvalidCredentials = enum.auto()
    UserNotFound = enum.auto()
    PasswordInvalid = enum.auto()
    NotAuthenticated = enum.auto()

    # Category status
    CategoryNotFound = enum.auto()
    CategoryInvalid = enum.auto()

    # Transaction status
    TransactionNotFound = enum.auto()
    TransactionInvalid = enum.auto()

    # Storage status
    StorageUnavailable = enum.auto()


STATUS_MESSAGE: Dict[Status, str] = {
    Status.UnknownStatus: 'Unknown status. Please check the settings.',
    Status.Okay: 'Everything is okay.',

    Status.SettingsNotFound: 'Could not find the settings file.',
    Status.SettingsInvalid: 'The settings file seems to be incomplete, or contains invalid values.',

    Status.UserExists: 'This email address is already in use.',
    Status.InvalidCredentials: 'The email or password is incorrect.',
    Status.UserNotFound: 'Could not find the user.',
    Status.PasswordInvalid: 'The new password is not valid.',
    Status.NotAuthenticated: 'No user is signed in. Please sign in first.',

    Status.CategoryNotFound: 'Could not find the category.',
    Status.CategoryInvalid: 'The category contains invalid values.',

    Status.TransactionNotFound: 'Could not find the transaction.',
    Status.TransactionInvalid: 'The transaction contains invalid values.',

    Status.StorageUnavailable: 'The local store could not be read or written.',
}


def get_message(status: Status) -> str:
    """
    Get the message for a given status.

    Args:
        status (Status): The status enum.

    Returns:
        str: The message associated with the status.
    """
    return STATUS_MESSAGE.get(status, 'Unknown status')


class BaseStatusException(Exception):
    """Base exception for status-based errors in PocketLedger.

    Attributes:
        status (Status): Status code associated with this error.
        status_message (str): User-facing message for the status.

    Args:
        message (str): Optional additional context for the error.
    """
    status = Status.UnknownStatus

    def __init__(self, message: str = None):
        self.status_message = get_message(self.status)
        exception_message = f'{self.status_message} {message}' if message else self.status_message
        super().__init__(exception_message)

        logging.error(exception_message)

        from ..ui.actions import signals
        signals.error.emit(message or self.status_message)


class UnknownException(BaseStatusException):
    """Exception for an unknown error during status processing."""
    pass


class SettingsNotFoundException(BaseStatusException):
    """Exception raised when the settings file cannot be found."""
    status = Status.SettingsNotFound


class SettingsInvalidException(BaseStatusException):
    """Exception raised when the settings file is invalid or malformed."""
    status = Status.SettingsInvalid


class UserExistsException(BaseStatusException):
    """Exception raised when registering an email address that is already taken."""
    status = Status.UserExists


class InvalidCredentialsException(BaseStatusException):
    """Exception raised when an email and password pair does not match."""
    status = Status.InvalidCredentials


class UserNotFoundException(BaseStatusException):
    """Exception raised when a user id is not present in the store."""
    status = Status.UserNotFound


class PasswordInvalidException(BaseStatusException):
    """Exception raised when a new password fails validation."""
    status = Status.PasswordInvalid


class NotAuthenticatedException(BaseStatusException):
    """Exception raised when an operation requires a signed-in user."""
    status = Status.NotAuthenticated


class CategoryNotFoundException(BaseStatusException):
    """Exception raised when a category id is not present in the store."""
    status = Status.CategoryNotFound


class CategoryInvalidException(BaseStatusException):
    """Exception raised when category data fails validation."""
    status = Status.CategoryInvalid


class TransactionNotFoundException(BaseStatusException):
    """Exception raised when a transaction id is not present in the store."""
    status = Status.TransactionNotFound


class TransactionInvalidException(BaseStatusException):
    """Exception raised when transaction data fails validation."""
    status = Status.TransactionInvalid


class StorageUnavailableException(BaseStatusException):
    """Exception raised when the key-value store cannot be opened or written."""
    status = Status.StorageUnavailable
