"""
Allow-list of job implementations.

Job messages name their job type with a string taken from the queue. The
string is only ever used as a key into a ``JobRegistry``; it is never
imported or looked up as a Python name.
"""

import logging
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from archivist.exceptions import MissingClassError

logger = logging.getLogger(__name__)

JobConstructor = Callable[[Dict[str, Any]], Any]


class JobRegistry:
    """Maps job type identifiers to the callables that construct them."""

    def __init__(self, jobs: Optional[Mapping[str, JobConstructor]] = None):
        self._jobs: Dict[str, JobConstructor] = {}
        for name, constructor in (jobs or {}).items():
            self.add(name, constructor)

    def add(self, name: str, constructor: JobConstructor) -> None:
        """Register *constructor* under *name*.

        Raises:
            ValueError: If *name* is already taken by a different constructor.
        """
        if not name:
            raise ValueError("Job name must be a non-empty string")
        existing = self._jobs.get(name)
        if existing is not None and existing is not constructor:
            raise ValueError(f"Job name '{name}' is already registered to {existing!r}")
        self._jobs[name] = constructor
        logger.debug(f"Registered job '{name}'")

    def register(self, name: Optional[str] = None):
        """Class decorator registering a job under *name* (default: class name)."""
        def decorator(cls):
            self.add(name or cls.__name__, cls)
            return cls
        return decorator

    def resolve(self, name: str) -> JobConstructor:
        """Return the constructor for *name*.

        Raises:
            MissingClassError: If nothing is registered under *name*.
        """
        try:
            return self._jobs[name]
        except (KeyError, TypeError):
            raise MissingClassError(f"Job class named {name} does not exist.") from None

    def names(self) -> List[str]:
        return sorted(self._jobs)

    def __contains__(self, name: object) -> bool:
        return name in self._jobs

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._jobs)


def default_registry() -> JobRegistry:
    """Registry holding the built-in jobs."""
    from archivist.jobs.builtin import BUILTIN_JOBS

    return JobRegistry({cls.__name__: cls for cls in BUILTIN_JOBS})
