"""Job dispatchers: hand a job to a queue, or run it on the spot."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from archivist.exceptions import MissingClassError
from archivist.jobs.descriptor import JobDescriptor
from archivist.jobs.factory import JobFactory
from archivist.jobs.registry import JobRegistry, default_registry

logger = logging.getLogger(__name__)


class BaseDispatcher(ABC):
    """Base class for job dispatchers."""

    def __init__(self, created_by: Optional[int] = None):
        self.created_by = created_by

    def _describe(self, class_name: str, options: Optional[Mapping[str, Any]]) -> JobDescriptor:
        return JobDescriptor(
            class_name=class_name,
            options=dict(options or {}),
            created_by=self.created_by,
        )

    @abstractmethod
    def send(self, class_name: str, options: Optional[Mapping[str, Any]] = None) -> str:
        """Dispatch a job and return its serialized message."""
        pass


class JobDispatcher(BaseDispatcher):
    """Serializes jobs onto a queue for a worker to pick up."""

    def __init__(self, queue, registry: Optional[JobRegistry] = None, created_by: Optional[int] = None):
        super().__init__(created_by)
        self.queue = queue
        self.registry = registry if registry is not None else default_registry()

    def send(self, class_name: str, options: Optional[Mapping[str, Any]] = None) -> str:
        if class_name not in self.registry:
            raise MissingClassError(f"Job class named {class_name} does not exist.")

        message = self._describe(class_name, options).to_message()
        self.queue.add_task(message)
        logger.info(f"Dispatched job {class_name}")
        return message


class SynchronousDispatcher(BaseDispatcher):
    """Builds and performs jobs in the calling process."""

    def __init__(self, factory: JobFactory, created_by: Optional[int] = None):
        super().__init__(created_by)
        self.factory = factory

    def send(self, class_name: str, options: Optional[Mapping[str, Any]] = None) -> str:
        message = self._describe(class_name, options).to_message()
        job = self.factory.from_message(message)
        logger.info(f"Running job {class_name} synchronously")
        job.perform()
        return message
