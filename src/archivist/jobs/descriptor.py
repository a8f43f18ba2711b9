"""
Job descriptors: the decoded form of a queued job message.

A message is a JSON object::

    {"className": "StoreFileJob", "options": {...}, "createdBy": 42}

``className`` and ``options`` are required (``options`` may be empty);
``createdBy`` is optional.
"""

import json
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from archivist.exceptions import MalformedJobError


class JobDescriptor(BaseModel):
    """Which job to run, with what options, on whose behalf."""
    class_name: str = Field(..., alias="className", description="Registered job type")
    options: Optional[Dict[str, Any]] = Field(..., description="Per-job options")
    created_by: Optional[int] = Field(None, alias="createdBy", description="Id of the user who queued the job")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("class_name", mode="before")
    @classmethod
    def class_name_as_text(cls, v):
        # Any value names a job type; unregistered ones fail in the factory.
        return v if isinstance(v, str) else str(v)

    def to_message(self) -> str:
        """Serialize to the JSON message format read by ``decode``."""
        return json.dumps(self.model_dump(by_alias=True, exclude_none=True))


def decode(raw_message: Union[str, bytes]) -> JobDescriptor:
    """Parse and validate a job message.

    Only the shape of the message is checked here. Whether ``className``
    names a registered job is checked by the factory.

    Raises:
        MalformedJobError: If the message is not JSON, is empty, or is
            missing ``className`` or ``options``.
    """
    try:
        data = json.loads(raw_message)
    except (TypeError, ValueError) as e:
        raise MalformedJobError(f"Invalid JSON: {str(e)} ({raw_message!r})") from e

    if not data:
        raise MalformedJobError(f"The following malformed job was given: {raw_message!r}")
    if not isinstance(data, dict):
        raise MalformedJobError(f"A job message must be a JSON object: {raw_message!r}")
    if "className" not in data:
        raise MalformedJobError("No 'className' attribute was given in the message.")
    if "options" not in data:
        raise MalformedJobError("No 'options' attribute was given in the message.")

    try:
        return JobDescriptor.model_validate(data)
    except ValidationError as e:
        raise MalformedJobError(f"Invalid job message: {str(e)}") from e
