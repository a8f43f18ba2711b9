import pytest

from archivist.exceptions import MissingClassError
from archivist.jobs.builtin import DeleteFileJob, MoveFileJob, StoreFileJob
from archivist.jobs.registry import JobRegistry, default_registry
from tests.fixtures.job_fixtures import ExportJob, FailingJob


def test_resolve_registered_job():
    registry = JobRegistry({"ExportJob": ExportJob})
    assert registry.resolve("ExportJob") is ExportJob


def test_resolve_unknown_job_raises():
    registry = JobRegistry({"ExportJob": ExportJob})

    with pytest.raises(MissingClassError):
        registry.resolve("NoSuchJob")


@pytest.mark.parametrize("name", [
    "os.system",
    "archivist.jobs.builtin.StoreFileJob",
    "tests.fixtures.job_fixtures.ExportJob",
    "__builtins__",
])
def test_resolve_never_imports_names(name):
    registry = JobRegistry({"ExportJob": ExportJob})

    with pytest.raises(MissingClassError):
        registry.resolve(name)


def test_register_decorator_uses_class_name():
    registry = JobRegistry()

    @registry.register()
    class ReindexJob(ExportJob):
        pass

    @registry.register("thumbnails")
    class ThumbnailJob(ExportJob):
        pass

    assert registry.resolve("ReindexJob") is ReindexJob
    assert registry.resolve("thumbnails") is ThumbnailJob
    assert registry.names() == ["ReindexJob", "thumbnails"]


def test_duplicate_name_rejected():
    registry = JobRegistry({"ExportJob": ExportJob})

    registry.add("ExportJob", ExportJob)
    with pytest.raises(ValueError):
        registry.add("ExportJob", FailingJob)


def test_default_registry_holds_builtin_jobs():
    registry = default_registry()

    assert len(registry) == 3
    assert registry.resolve("StoreFileJob") is StoreFileJob
    assert registry.resolve("MoveFileJob") is MoveFileJob
    assert registry.resolve("DeleteFileJob") is DeleteFileJob
    assert "ExportJob" not in registry
