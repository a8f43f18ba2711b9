"""Select the storage adapter for this process from settings."""
import logging
from typing import TYPE_CHECKING, Optional

from archivist.exceptions import ConfigurationError
from archivist.settings import Settings, get_settings
from archivist.storage.base import StorageAdapter
from archivist.storage.local import LocalStorageAdapter
from archivist.storage.s3 import S3StorageAdapter

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)


def _local_adapter(settings: Settings, client=None) -> StorageAdapter:
    return LocalStorageAdapter(settings.storage_dir, web_dir=settings.storage_web_dir)


def _s3_adapter(settings: Settings, client: Optional["S3Client"] = None) -> StorageAdapter:
    return S3StorageAdapter(
        settings.s3_adapter_options(),
        client=client,
        client_options={
            "endpoint_url": settings.aws_endpoint_url,
            "connect_timeout": settings.s3_connect_timeout,
            "read_timeout": settings.s3_read_timeout,
        },
    )


ADAPTER_CLASSES = {
    "local": _local_adapter,
    "s3": _s3_adapter,
}


def create_storage_adapter(settings: Optional[Settings] = None, client=None) -> StorageAdapter:
    """Build the adapter named by ``settings.storage_adapter``.

    Args:
        settings: Settings to read; defaults to the process settings.
        client: Backend client to inject, for backends that use one.
    """
    settings = settings or get_settings()

    adapter_name = settings.storage_adapter
    if adapter_name not in ADAPTER_CLASSES:
        raise ConfigurationError(
            f"Invalid storage adapter: {adapter_name}. "
            f"Choose from {list(ADAPTER_CLASSES.keys())}"
        )

    logger.info(f"Creating storage adapter: {adapter_name}")
    return ADAPTER_CLASSES[adapter_name](settings, client)
