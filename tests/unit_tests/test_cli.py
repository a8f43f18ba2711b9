import json

import pytest
from click.testing import CliRunner

from archivist.cli import cli


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.setenv("QUEUE_DIR", str(tmp_path / "queue"))
    monkeypatch.setenv("STORAGE_DIR", str(tmp_path / "storage"))
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "archivist.db"))
    return tmp_path


def test_enqueue_then_work(workspace):
    runner = CliRunner()

    result = runner.invoke(cli, ["enqueue", "DeleteFileJob", "-o", "key=files/missing.jpg"])
    assert result.exit_code == 0, result.output

    [queued] = list((workspace / "queue").glob("*.json"))
    assert json.loads(queued.read_text()) == {"className": "DeleteFileJob", "options": {"key": "files/missing.jpg"}}

    result = runner.invoke(cli, ["worker", "--max-messages", "5"])
    assert result.exit_code == 0, result.output
    assert "Handled 1 message(s)" in result.output
    assert not (workspace / "queue" / "errors").exists()


def test_enqueue_unknown_job_fails(workspace):
    result = CliRunner().invoke(cli, ["enqueue", "NoSuchJob"])

    assert result.exit_code != 0
    assert "NoSuchJob" in result.output


def test_enqueue_rejects_bad_option(workspace):
    result = CliRunner().invoke(cli, ["enqueue", "DeleteFileJob", "-o", "no-equals-sign"])
    assert result.exit_code != 0


def test_uri_for_local_storage(workspace, monkeypatch):
    monkeypatch.setenv("STORAGE_WEB_DIR", "http://example.org/files")

    result = CliRunner().invoke(cli, ["uri", "files/1/original.jpg"])

    assert result.exit_code == 0
    assert result.output.strip() == "http://example.org/files/files/1/original.jpg"


def test_storage_check(workspace):
    runner = CliRunner()

    assert runner.invoke(cli, ["storage-check"]).exit_code == 1
    (workspace / "storage").mkdir()
    assert runner.invoke(cli, ["storage-check"]).exit_code == 0
