"""Exception types raised by the job and storage layers."""

from typing import Optional


class ArchivistError(Exception):
    """Base class for all archivist errors."""


class JobError(ArchivistError):
    """Base class for errors turning a message into a job."""


class MalformedJobError(JobError):
    """The job message cannot be parsed, is missing fields, or names an unknown user."""


class MissingClassError(JobError):
    """The job message names a job type that is not registered."""


class StorageError(ArchivistError):
    """A storage backend operation failed."""

    def __init__(self, message: str, result=None, key: Optional[str] = None):
        super().__init__(message)
        self.result = result
        self.key = key


class ConfigurationError(StorageError):
    """A storage adapter was constructed without the settings it requires."""
