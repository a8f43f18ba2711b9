"""
Job layer: decode queued job messages and build runnable jobs from them.
"""

from archivist.jobs.base import BaseJob
from archivist.jobs.descriptor import JobDescriptor, decode
from archivist.jobs.factory import JobFactory
from archivist.jobs.registry import JobRegistry, default_registry

__all__ = [
    "BaseJob",
    "JobDescriptor",
    "JobFactory",
    "JobRegistry",
    "decode",
    "default_registry",
]
