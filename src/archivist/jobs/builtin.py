"""Jobs that run storage operations in the background."""

import logging

from archivist.jobs.base import BaseJob

logger = logging.getLogger(__name__)


class StoreFileJob(BaseJob):
    """Move a local file into storage.

    Options: ``source`` (local path), ``dest`` (storage key).
    """

    def __init__(self, options):
        super().__init__(options)
        self.source = self.require_option("source")
        self.dest = self.require_option("dest")

    def perform(self) -> None:
        self.storage.store(self.source, self.dest)


class MoveFileJob(BaseJob):
    """Relocate a stored file. Options: ``source``, ``dest`` (storage keys)."""

    def __init__(self, options):
        super().__init__(options)
        self.source = self.require_option("source")
        self.dest = self.require_option("dest")

    def perform(self) -> None:
        self.storage.move(self.source, self.dest)


class DeleteFileJob(BaseJob):
    """Remove a stored file. Options: ``key``."""

    def __init__(self, options):
        super().__init__(options)
        self.key = self.require_option("key")

    def perform(self) -> None:
        result = self.storage.delete(self.key)
        logger.info(f"DeleteFileJob for '{self.key}' finished: {result.value}")


BUILTIN_JOBS = (StoreFileJob, MoveFileJob, DeleteFileJob)
