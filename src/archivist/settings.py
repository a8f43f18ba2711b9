# src/archivist/settings.py
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_STORAGE_ADAPTERS = ("local", "s3")
VALID_QUEUE_TYPES = ("local", "sqs")


def normalize_expiration(value: Any) -> int:
    """Coerce an expiration in minutes to a non-negative integer.

    Anything that is not a positive integer (None, junk strings, zero,
    negative numbers) means "no signing" and becomes 0.
    """
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        return 0
    return minutes if minutes > 0 else 0


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from archivist.settings import get_settings
        settings = get_settings()
        bucket_name = settings.s3_bucket_name
    """

    app_name: str = Field(
        default="archivist",
        description="Application name"
    )

    # Storage Configuration
    storage_adapter: str = Field(
        default="local",
        alias="STORAGE_ADAPTER",
        description="Storage backend: local or s3"
    )

    storage_dir: str = Field(
        default="storage",
        alias="STORAGE_DIR",
        description="Root directory for the local storage adapter"
    )

    storage_web_dir: Optional[str] = Field(
        default=None,
        alias="STORAGE_WEB_DIR",
        description="Base URL that serves files from storage_dir"
    )

    storage_expiration: int = Field(
        default=0,
        alias="STORAGE_EXPIRATION",
        description="Minutes a signed S3 URL stays valid; 0 uploads public files"
    )

    # AWS Core Settings
    aws_region: Optional[str] = Field(
        default=None,
        alias="AWS_DEFAULT_REGION"
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL",
        description="API endpoint override for S3-compatible stores and moto"
    )

    # S3 Configuration
    s3_bucket_name: Optional[str] = Field(
        default=None,
        alias="S3_BUCKET_NAME",
        description="S3 bucket for stored files"
    )

    s3_public_endpoint: Optional[str] = Field(
        default=None,
        alias="S3_PUBLIC_ENDPOINT",
        description="Endpoint used when building file URLs"
    )

    s3_connect_timeout: float = Field(
        default=10.0,
        alias="S3_CONNECT_TIMEOUT"
    )

    s3_read_timeout: float = Field(
        default=60.0,
        alias="S3_READ_TIMEOUT"
    )

    # Queue Configuration
    queue_type: str = Field(
        default="local",
        alias="QUEUE_TYPE",
        description="Job queue transport: local or sqs"
    )

    queue_dir: str = Field(
        default="queue_data",
        alias="QUEUE_DIR",
        description="Directory used by the local queue"
    )

    sqs_queue_url: Optional[str] = Field(
        default=None,
        alias="SQS_QUEUE_URL",
        description="Full SQS queue URL"
    )

    sqs_dead_letter_url: Optional[str] = Field(
        default=None,
        alias="SQS_DEAD_LETTER_URL",
        description="SQS queue receiving jobs that could not be run"
    )

    worker_poll_interval: float = Field(
        default=1.0,
        alias="WORKER_POLL_INTERVAL"
    )

    # Database Configuration
    database_path: str = Field(
        default="archivist.db",
        alias="DATABASE_PATH"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level"
    )

    @field_validator("storage_expiration", mode="before")
    @classmethod
    def normalize_storage_expiration(cls, v):
        return normalize_expiration(v)

    @field_validator("storage_adapter", "queue_type", mode="before")
    @classmethod
    def lowercase_names(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("storage_adapter")
    @classmethod
    def validate_storage_adapter(cls, v):
        if v not in VALID_STORAGE_ADAPTERS:
            raise ValueError(f"Invalid storage_adapter: {v}. Must be one of {list(VALID_STORAGE_ADAPTERS)}")
        return v

    @field_validator("queue_type")
    @classmethod
    def validate_queue_type(cls, v):
        if v not in VALID_QUEUE_TYPES:
            raise ValueError(f"Invalid queue_type: {v}. Must be one of {list(VALID_QUEUE_TYPES)}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    def s3_adapter_options(self) -> Dict[str, Any]:
        """Adapter configuration in the keys the S3 adapter accepts."""
        options = {
            "accessKeyId": self.aws_access_key_id,
            "secretAccessKey": self.aws_secret_access_key,
            "region": self.aws_region,
            "bucket": self.s3_bucket_name,
            "expiration": self.storage_expiration,
        }
        if self.s3_public_endpoint:
            options["endpoint"] = self.s3_public_endpoint
        return options

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
