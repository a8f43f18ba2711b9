import json

import pytest

from archivist.exceptions import MissingClassError
from archivist.jobs.dispatcher import JobDispatcher, SynchronousDispatcher
from archivist.jobs.factory import JobFactory


def test_job_dispatcher_queues_message(memory_queue, job_registry):
    dispatcher = JobDispatcher(memory_queue, registry=job_registry, created_by=1)

    dispatcher.send("ExportJob", {"format": "csv"})

    assert [json.loads(m) for m in memory_queue.messages] == [
        {"className": "ExportJob", "options": {"format": "csv"}, "createdBy": 1}
    ]


def test_job_dispatcher_rejects_unknown_class(memory_queue, job_registry):
    dispatcher = JobDispatcher(memory_queue, registry=job_registry)

    with pytest.raises(MissingClassError):
        dispatcher.send("NoSuchJob")

    assert memory_queue.messages == []


def test_dispatched_message_builds(memory_queue, job_registry, factory):
    JobDispatcher(memory_queue, registry=job_registry).send("ExportJob")

    job = factory.from_message(memory_queue.get_task())

    assert job.options == {}


def test_synchronous_dispatcher_performs(job_registry, user_db, monkeypatch):
    performed = []
    monkeypatch.setattr(
        "tests.fixtures.job_fixtures.ExportJob.perform",
        lambda self: performed.append((self.get_option("format"), self.user.username)),
    )
    dispatcher = SynchronousDispatcher(JobFactory({"db": user_db}, registry=job_registry), created_by=1)

    dispatcher.send("ExportJob", {"format": "csv"})

    assert performed == [("csv", "editor")]
