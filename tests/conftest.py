
import boto3
import pytest
from moto import mock_aws

from archivist.settings import get_settings
from tests.consts import TEST_ACCESS_KEY_ID, TEST_BUCKET_NAME, TEST_REGION, TEST_SECRET_ACCESS_KEY

from tests.fixtures.job_fixtures import (  # noqa: F401
    factory,
    job_registry,
    memory_queue,
    user_db,
)
from tests.fixtures.storage_fixtures import (  # noqa: F401
    local_storage,
    private_s3_adapter,
    public_s3_adapter,
)


SETTINGS_ENV_VARS = (
    "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_DEFAULT_REGION", "AWS_ENDPOINT_URL",
    "S3_BUCKET_NAME", "S3_PUBLIC_ENDPOINT", "STORAGE_ADAPTER", "STORAGE_DIR", "STORAGE_WEB_DIR",
    "STORAGE_EXPIRATION", "QUEUE_TYPE", "QUEUE_DIR", "SQS_QUEUE_URL", "SQS_DEAD_LETTER_URL",
    "DATABASE_PATH", "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's shell settings out of the tests."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mocked AWS credentials so nothing can reach a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", TEST_ACCESS_KEY_ID)
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", TEST_SECRET_ACCESS_KEY)
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def mocked_aws(aws_credentials):
    """Moto-backed AWS with the test bucket created."""
    with mock_aws():
        s3_client = boto3.client("s3", region_name=TEST_REGION)
        s3_client.create_bucket(Bucket=TEST_BUCKET_NAME)
        yield


@pytest.fixture
def s3_client(mocked_aws):
    return boto3.client("s3", region_name=TEST_REGION)


@pytest.fixture
def local_file(tmp_path):
    """A small file on local disk, as left behind by an upload."""
    from tests.consts import TEST_FILE_CONTENT

    path = tmp_path / "upload" / "original.jpg"
    path.parent.mkdir(parents=True)
    path.write_bytes(TEST_FILE_CONTENT)
    return path
