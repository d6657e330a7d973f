"""Errors raised by the record stores and the entity model."""

from typing import Optional


class RecordError(Exception):
    """Base class for record-level failures."""


class NotFoundError(RecordError):
    """The requested record or sub-record does not exist."""


class AlreadyExistsError(RecordError):
    """A record with the same key already exists."""


class RecordValidationError(RecordError):
    """
    A record failed validation.

    Args:
        message: Human readable reason
        failure: The ValidationFailure kind, when the error came from
            history validation
    """

    def __init__(self, message: str, failure: Optional[str] = None):
        super().__init__(message)
        self.failure = failure
