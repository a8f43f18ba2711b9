"""
Storage adapters.

``StorageAdapter`` is the contract; ``create_storage_adapter`` picks the
implementation configured for this process.
"""

from archivist.storage.base import DeleteResult, StorageAdapter
from archivist.storage.factory import create_storage_adapter
from archivist.storage.local import LocalStorageAdapter
from archivist.storage.s3 import S3StorageAdapter

__all__ = [
    "DeleteResult",
    "StorageAdapter",
    "LocalStorageAdapter",
    "S3StorageAdapter",
    "create_storage_adapter",
]
