"""S3 client construction."""
import logging
from typing import TYPE_CHECKING, Optional

import boto3
from botocore.config import Config

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)

# Retries on throttling, timeouts and connection errors, then the
# error surfaces. Nothing above the client retries.
MAX_RETRIES = 3


def create_s3_client(
    aws_access_key_id: Optional[str] = None,
    aws_secret_access_key: Optional[str] = None,
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    connect_timeout: float = 10.0,
    read_timeout: float = 60.0,
) -> "S3Client":
    """Create an S3 client with bounded retries.

    Each call returns a new client. Share one between adapters by passing
    it to each adapter explicitly.
    """
    client_config = Config(
        retries={"max_attempts": MAX_RETRIES, "mode": "standard"},
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
    )
    client = boto3.client(
        's3',
        region_name=region_name,
        endpoint_url=endpoint_url,
        aws_access_key_id=aws_access_key_id,
        aws_secret_access_key=aws_secret_access_key,
        config=client_config,
    )
    logger.debug(f"Created S3 client (region={region_name}, endpoint={endpoint_url})")
    return client
