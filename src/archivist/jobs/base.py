from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from archivist.exceptions import ConfigurationError, MalformedJobError
from archivist.storage.base import StorageAdapter

# Keys the factory fills in. A resolved creator replaces any "user" in the message.
USER_OPTION = "user"
DB_OPTION = "db"
STORAGE_OPTION = "storage"


class BaseJob(ABC):
    """Base class for job implementations.

    Jobs are built by ``JobFactory`` from merged options: the message's own
    options overlaid by the process options.
    """

    def __init__(self, options: Mapping[str, Any]):
        self._options: Dict[str, Any] = dict(options)

    @property
    def options(self) -> Dict[str, Any]:
        return dict(self._options)

    @property
    def user(self) -> Optional[Any]:
        """The resolved creator, or the message's own ``user`` option when none was resolved."""
        return self._options.get(USER_OPTION)

    @property
    def db(self) -> Optional[Any]:
        return self._options.get(DB_OPTION)

    @property
    def storage(self) -> StorageAdapter:
        storage = self._options.get(STORAGE_OPTION)
        if not isinstance(storage, StorageAdapter):
            raise ConfigurationError(f"No storage adapter configured for {type(self).__name__}.")
        return storage

    def get_option(self, name: str, default: Any = None) -> Any:
        return self._options.get(name, default)

    def require_option(self, name: str) -> Any:
        """Return option *name*, failing the job if it is missing or empty."""
        value = self._options.get(name)
        if value is None or value == "":
            raise MalformedJobError(f"{type(self).__name__} requires the '{name}' option.")
        return value

    @abstractmethod
    def perform(self) -> None:
        """Run the job."""
        pass
