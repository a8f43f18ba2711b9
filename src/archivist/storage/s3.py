"""
Cloud storage adapter for Amazon S3 and S3-compatible object stores.

Files are uploaded private and linked with signed URLs when an expiration
is configured, and uploaded public-read with plain URLs otherwise.
"""

import logging
import os
import time
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict, Field, field_validator

from archivist.exceptions import ConfigurationError, StorageError
from archivist.settings import normalize_expiration
from archivist.storage import signing
from archivist.storage.base import DeleteResult, StorageAdapter
from archivist.storage.client import create_s3_client

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://s3.amazonaws.com"
ACL_PRIVATE = "private"
ACL_PUBLIC_READ = "public-read"
NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")

_BACKEND_ERRORS = (ClientError, BotoCoreError, Boto3Error)
_UPLOAD_ERRORS = _BACKEND_ERRORS + (OSError,)


class S3AdapterConfig(BaseModel):
    """Options for ``S3StorageAdapter``; immutable once built."""
    access_key_id: str = Field(..., alias="accessKeyId", min_length=1)
    secret_access_key: str = Field(..., alias="secretAccessKey", min_length=1)
    bucket: str = Field(..., min_length=1)
    region: Optional[str] = None
    expiration: int = Field(0, description="Minutes signed URLs stay valid; 0 disables signing")
    endpoint: Optional[str] = Field(None, description="Public endpoint used to build URLs")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("expiration", mode="before")
    @classmethod
    def normalize(cls, v):
        return normalize_expiration(v)

    @field_validator("region", "endpoint", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return v or None

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "S3AdapterConfig":
        """Validate an options mapping, raising ConfigurationError on missing values."""
        if not options.get("accessKeyId") or not options.get("secretAccessKey"):
            raise ConfigurationError(
                "You must specify your AWS access key and secret key to use the S3 storage adapter."
            )
        if not options.get("bucket"):
            raise ConfigurationError("You must specify an S3 bucket name to use the S3 storage adapter.")
        return cls.model_validate(dict(options))

    @property
    def url_endpoint(self) -> str:
        if self.endpoint:
            return self.endpoint.rstrip("/")
        if not self.region or self.region == "us-east-1":
            return DEFAULT_ENDPOINT
        return f"https://s3-{self.region}.amazonaws.com"


def _is_not_found(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in NOT_FOUND_CODES


class S3StorageAdapter(StorageAdapter):
    """Storage adapter backed by an S3 bucket.

    Args:
        options: Mapping with accessKeyId, secretAccessKey, bucket and
            optionally region, expiration and endpoint.
        client: S3 client to use. If omitted, one is created on first use.
        client_options: Extra keyword arguments for ``create_s3_client``
            when the client is created here (endpoint_url, timeouts).
        clock: Returns the current epoch time; used for URL expiry.
    """

    def __init__(
        self,
        options: Mapping[str, Any],
        client: Optional["S3Client"] = None,
        client_options: Optional[Mapping[str, Any]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = S3AdapterConfig.from_options(options)
        self._client = client
        self._client_options = dict(client_options or {})
        self._clock = clock

    @property
    def client(self) -> "S3Client":
        if self._client is None:
            self._client = create_s3_client(
                aws_access_key_id=self.config.access_key_id,
                aws_secret_access_key=self.config.secret_access_key,
                region_name=self.config.region,
                **self._client_options,
            )
        return self._client

    @property
    def bucket(self) -> str:
        return self.config.bucket

    @property
    def expiration(self) -> int:
        return self.config.expiration

    def set_up(self) -> None:
        # Nothing to prepare; the bucket is provisioned outside the application.
        pass

    def can_store(self) -> bool:
        try:
            self.client.head_bucket(Bucket=self.bucket)
            return True
        except _BACKEND_ERRORS as e:
            logger.info(f"S3 bucket '{self.bucket}' is not available: {str(e)}")
            return False

    def store(self, source: str, dest: str) -> None:
        object_name = self._get_object_name(dest)

        try:
            self.client.upload_file(
                Filename=source,
                Bucket=self.bucket,
                Key=dest,
                ExtraArgs={"ACL": self._acl()},
            )
        except _UPLOAD_ERRORS as e:
            logger.error(f"Error uploading '{source}' to S3 as '{object_name}': {str(e)}")
            raise StorageError("Unable to store file.", key=dest) from e

        logger.info(f"S3StorageAdapter: Stored '{source}' as '{object_name}'.")
        try:
            os.remove(source)
        except OSError as e:
            # The object is stored; only the local copy is left behind.
            logger.warning(f"S3StorageAdapter: Could not remove local file '{source}': {str(e)}")

    def move(self, source: str, dest: str) -> None:
        source_object = self._get_object_name(source)
        dest_object = self._get_object_name(dest)

        try:
            self.client.copy_object(
                Bucket=self.bucket,
                Key=dest,
                CopySource={"Bucket": self.bucket, "Key": source},
                ACL=self._acl(),
            )
            self.client.delete_object(Bucket=self.bucket, Key=source)
        except _BACKEND_ERRORS as e:
            logger.error(f"Error moving '{source_object}' to '{dest_object}': {str(e)}")
            raise StorageError("Unable to move file.", key=source) from e

        logger.info(f"S3StorageAdapter: Moved '{source_object}' to '{dest_object}'.")

    def exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            if _is_not_found(e):
                return False
            raise StorageError(f"Unable to check file '{key}'.", key=key) from e
        except BotoCoreError as e:
            raise StorageError(f"Unable to check file '{key}'.", key=key) from e

    def _delete(self, key: str) -> DeleteResult:
        object_name = self._get_object_name(key)

        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except _BACKEND_ERRORS as e:
            logger.info(f"Remove of '{object_name}' reported failure ({str(e)}); checking whether it exists")
            try:
                present = self.exists(key)
            except StorageError as check_error:
                logger.error(f"Could not check existence of '{object_name}': {str(check_error)}")
                return DeleteResult.FAILED
            return DeleteResult.FAILED if present else DeleteResult.ALREADY_ABSENT

        logger.info(f"S3StorageAdapter: Removed object '{object_name}'.")
        return DeleteResult.DELETED

    def get_uri(self, key: str) -> str:
        """Get a URI for a stored file, signed when an expiration is configured."""
        resource = signing.urlencode(self._get_object_name(key))
        uri = f"{self.config.url_endpoint}/{resource}"

        if not self.expiration:
            return uri

        expires = signing.expiry_timestamp(self._clock(), self.expiration)
        return signing.sign_url(
            uri,
            resource,
            self.config.access_key_id,
            self.config.secret_access_key,
            expires,
        )

    def _acl(self) -> str:
        # With an expiration, files are private and reached through signed URLs.
        return ACL_PRIVATE if self.expiration else ACL_PUBLIC_READ

    def _get_object_name(self, key: str) -> str:
        """Object identifier as ``{bucket}/{key}``, the form existing URLs were issued in."""
        return f"{self.bucket}/{key}"
