"""Storage adapter that keeps files in a local directory."""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote

from archivist.exceptions import ConfigurationError, StorageError
from archivist.storage.base import DeleteResult, StorageAdapter

logger = logging.getLogger(__name__)


class LocalStorageAdapter(StorageAdapter):
    """Keeps stored files under *local_dir*.

    Args:
        local_dir: Directory files are stored in.
        web_dir: Base URL the web server exposes *local_dir* at. Without
            it, ``get_uri`` returns ``file://`` URIs.
    """

    def __init__(self, local_dir: Union[str, Path], web_dir: Optional[str] = None):
        if not local_dir:
            raise ConfigurationError("You must specify a local directory to use the local storage adapter.")
        self.local_dir = Path(local_dir).resolve()
        self.web_dir = web_dir.rstrip("/") if web_dir else None

    def set_up(self) -> None:
        self.local_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Local storage initialized at: {self.local_dir}")

    def can_store(self) -> bool:
        return self.local_dir.is_dir() and os.access(self.local_dir, os.W_OK)

    def store(self, source: str, dest: str) -> None:
        dest_path = self._get_path(dest)
        try:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), str(dest_path))
        except OSError as e:
            logger.error(f"Error storing '{source}' as '{dest_path}': {str(e)}")
            raise StorageError("Unable to store file.", key=dest) from e

        logger.info(f"LocalStorageAdapter: Stored '{source}' as '{dest_path}'.")

    def move(self, source: str, dest: str) -> None:
        source_path = self._get_path(source)
        dest_path = self._get_path(dest)
        if not source_path.is_file():
            raise StorageError(f"Unable to move file: '{source}' does not exist.", key=source)

        try:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            os.replace(source_path, dest_path)
        except OSError as e:
            logger.error(f"Error moving '{source_path}' to '{dest_path}': {str(e)}")
            raise StorageError("Unable to move file.", key=source) from e

        logger.info(f"LocalStorageAdapter: Moved '{source_path}' to '{dest_path}'.")

    def exists(self, key: str) -> bool:
        return self._get_path(key).is_file()

    def _delete(self, key: str) -> DeleteResult:
        path = self._get_path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return DeleteResult.ALREADY_ABSENT
        except OSError as e:
            logger.info(f"Remove of '{path}' reported failure ({str(e)}); checking whether it exists")
            return DeleteResult.FAILED if path.exists() else DeleteResult.ALREADY_ABSENT

        logger.info(f"LocalStorageAdapter: Removed '{path}'.")
        return DeleteResult.DELETED

    def get_uri(self, key: str) -> str:
        if self.web_dir:
            return f"{self.web_dir}/{quote(key)}"
        return self._get_path(key).as_uri()

    def _get_path(self, key: str) -> Path:
        """Absolute path for *key*, refusing keys that point outside local_dir."""
        path = (self.local_dir / key).resolve()
        if path == self.local_dir or self.local_dir not in path.parents:
            raise StorageError(f"Invalid storage key '{key}'.", key=key)
        return path
