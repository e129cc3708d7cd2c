"""
Module: exceptions
Purpose: Custom exception hierarchy for Simple Archiver.
"""

from .models.results import ErrorKind


class ArchiverError(Exception):
    """Base exception for Simple Archiver."""

    kind = ErrorKind.IO_FAILURE


class AlreadyArchivedError(ArchiverError):
    kind = ErrorKind.ALREADY_ARCHIVED


class NotArchivedError(ArchiverError):
    kind = ErrorKind.NOT_ARCHIVED


class OperationCancelledError(ArchiverError):
    kind = ErrorKind.CANCELLED


class VaultIOError(ArchiverError):
    """Raised by the gateway when a move, create, trash, read or delete fails."""

    kind = ErrorKind.IO_FAILURE


class SettingsError(ArchiverError):
    pass


class InvalidArchiveFolderError(SettingsError):
    pass
