"""
Contract every storage backend implements.

Callers hold a ``StorageAdapter`` and never branch on which backend is
behind it. Backends are chosen by configuration in
``archivist.storage.factory``.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from archivist.exceptions import StorageError

logger = logging.getLogger(__name__)


class DeleteResult(str, Enum):
    """Outcome of a delete once the backend's answer has been disambiguated."""
    DELETED = 'deleted'
    ALREADY_ABSENT = 'already_absent'
    FAILED = 'failed'


class StorageAdapter(ABC):
    """Base class for storage backends."""

    @abstractmethod
    def set_up(self) -> None:
        """One-time backend initialization. May be a no-op."""
        pass

    @abstractmethod
    def can_store(self) -> bool:
        """Whether the backend is currently reachable and usable.

        Must not change any state.
        """
        pass

    @abstractmethod
    def store(self, source: str, dest: str) -> None:
        """Move a local file into storage.

        Args:
            source: Local filesystem path to the file. Removed on success,
                left untouched on failure.
            dest: Storage key to store the file under.

        Raises:
            StorageError: If the backend did not accept the file.
        """
        pass

    @abstractmethod
    def move(self, source: str, dest: str) -> None:
        """Relocate a stored file from one key to another.

        Raises:
            StorageError: If the backend could not move the file.
        """
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Whether an object is stored under *key*."""
        pass

    @abstractmethod
    def _delete(self, key: str) -> DeleteResult:
        """Remove *key* and report what happened.

        Implementations issue the remove and, if the backend reports a
        failure, check existence to tell FAILED from ALREADY_ABSENT.
        """
        pass

    @abstractmethod
    def get_uri(self, key: str) -> str:
        """URL that retrieves the stored file."""
        pass

    def delete(self, key: str) -> DeleteResult:
        """Remove a stored file.

        Deleting something that is confirmed gone is not an error: the
        result is ALREADY_ABSENT and a warning is logged.

        Raises:
            StorageError: If the object is confirmed to still be present.
        """
        result = self._delete(key)
        if result is DeleteResult.FAILED:
            raise StorageError(f"Unable to delete file '{key}'.", result=result, key=key)
        if result is DeleteResult.ALREADY_ABSENT:
            logger.warning(f"{type(self).__name__}: Tried to delete missing object '{key}'.")
        return result
