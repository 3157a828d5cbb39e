"""Outcome codes for preset and parameter operations, and the exceptions that carry them.

Every exception logs itself and emits :attr:`signals.error` when raised, so callers only need to
catch :class:`BaseStatusException` to report a failure.
"""
import enum
import logging
from typing import Dict, Optional


class Status(enum.StrEnum):
    """Enumeration of application status codes."""
    UnknownStatus = enum.auto()
    Okay = enum.auto()

    # Preset store status
    InvalidArgument = enum.auto()
    Conflict = enum.auto()
    NotFound = enum.auto()
    PersistenceError = enum.auto()
    InvalidFormat = enum.auto()
    ConfirmationMismatch = enum.auto()

    # Parameter status
    ParametersInvalid = enum.auto()
    TemplateNotFound = enum.auto()


STATUS_MESSAGE: Dict[Status, str] = {
    Status.UnknownStatus: 'Unknown status.',
    Status.Okay: 'Everything is okay.',

    Status.InvalidArgument: 'Invalid argument.',
    Status.Conflict: 'A preset with this name already exists.',
    Status.NotFound: 'Preset not found.',
    Status.PersistenceError: 'Could not write presets to storage.',
    Status.InvalidFormat: 'The preset data is not in a valid format.',
    Status.ConfirmationMismatch: 'Confirmation does not match.',

    Status.ParametersInvalid: 'The parameters are incomplete, or contain invalid values.',
    Status.TemplateNotFound: 'Could not find the parameter template.',
}


def get_message(status: Status) -> str:
    """Return the user-facing message for status."""
    return STATUS_MESSAGE.get(status, STATUS_MESSAGE[Status.UnknownStatus])


class BaseStatusException(Exception):
    """Base exception for status-based errors in SketchPresets.

    Attributes:
        status (Status): Status code associated with this error.
        status_message (str): User-facing message for the status.
        detail (str): The additional context passed in, or an empty string.

    Args:
        message (str): Optional additional context for the error.
    """
    status = Status.UnknownStatus

    def __init__(self, message: Optional[str] = None):
        self.status_message = get_message(self.status)
        self.detail = message or ''
        exception_message = f'{self.status_message} {message}' if message else self.status_message
        super().__init__(exception_message)

        logging.error(exception_message)

        from ..ui.actions import signals
        signals.error.emit(exception_message)


class UnknownException(BaseStatusException):
    pass


class InvalidArgumentException(BaseStatusException):
    """Exception raised when an operation receives an unusable argument, e.g. a blank preset name."""
    status = Status.InvalidArgument


class PresetConflictException(BaseStatusException):
    """Exception raised when saving over an existing preset without the overwrite flag."""
    status = Status.Conflict


class PresetNotFoundException(BaseStatusException):
    """Exception raised when loading or deleting a preset that does not exist."""
    status = Status.NotFound


class PersistenceException(BaseStatusException):
    """Exception raised when the preset collection cannot be written to its storage."""
    status = Status.PersistenceError


class InvalidFormatException(BaseStatusException):
    """Exception raised when imported preset data is malformed."""
    status = Status.InvalidFormat


class ConfirmationMismatchException(BaseStatusException):
    """Exception raised when clearing presets without the exact confirmation token."""
    status = Status.ConfirmationMismatch


class ParametersInvalidException(BaseStatusException):
    """Exception raised when live parameters or an applied snapshot fail validation."""
    status = Status.ParametersInvalid


class TemplateNotFoundException(BaseStatusException):
    """Exception raised when the parameter template file is missing."""
    status = Status.TemplateNotFound
