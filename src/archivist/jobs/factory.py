"""Factory for turning job messages into job instances."""

import logging
from typing import Any, Mapping, Optional, Union

from archivist.exceptions import MalformedJobError
from archivist.jobs.base import BaseJob, DB_OPTION, USER_OPTION
from archivist.jobs.descriptor import JobDescriptor, decode
from archivist.jobs.registry import JobRegistry, default_registry

logger = logging.getLogger(__name__)


class JobFactory:
    """Builds job instances from descriptors.

    Args:
        process_options: Options every job receives, such as the ``db``
            handle and the ``storage`` adapter. These override per-job
            options of the same name, so a job message can never replace
            operator-controlled settings.
        registry: Job types that may be built. Defaults to the built-in jobs.
    """

    def __init__(
        self,
        process_options: Optional[Mapping[str, Any]] = None,
        registry: Optional[JobRegistry] = None,
    ):
        self._options = dict(process_options or {})
        self._registry = registry if registry is not None else default_registry()

    @property
    def registry(self) -> JobRegistry:
        return self._registry

    def from_message(self, raw_message: Union[str, bytes]) -> BaseJob:
        """Decode a JSON job message and build the job it describes."""
        return self.build(decode(raw_message))

    def build(self, descriptor: JobDescriptor) -> BaseJob:
        """Instantiate the job described by *descriptor*.

        Raises:
            MissingClassError: If the job type is not registered.
            MalformedJobError: If the creating user does not exist.
        """
        job_class = self._registry.resolve(descriptor.class_name)

        options = dict(descriptor.options or {})

        db = self._options.get(DB_OPTION)
        if db is not None and descriptor.created_by is not None:
            user = db.find_user(descriptor.created_by)
            if not user:
                raise MalformedJobError("The user that created this job does not exist.")
            options[USER_OPTION] = user

        job_options = {**options, **self._options}
        logger.debug(f"Building job {descriptor.class_name} with options {sorted(job_options)}")
        return job_class(job_options)
