# cli.py
import logging
import sys

import click

from archivist.database import Database
from archivist.exceptions import ArchivistError
from archivist.jobs.dispatcher import JobDispatcher
from archivist.jobs.factory import JobFactory
from archivist.logging_config import configure_logging
from archivist.queue import QueueFactory
from archivist.settings import get_settings
from archivist.storage.factory import create_storage_adapter
from archivist.worker import JobWorker

logger = logging.getLogger(__name__)


def _parse_options(pairs):
    options = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got '{pair}'", param_hint="--option")
        options[key] = value
    return options


@click.group()
def cli():
    """Job worker and storage management commands"""
    configure_logging(get_settings().log_level)


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    print("Current Configuration:")
    print(f"  Storage Adapter: {settings.storage_adapter}")
    print(f"  Storage Dir: {settings.storage_dir}")
    print(f"  S3 Bucket: {settings.s3_bucket_name}")
    print(f"  AWS Region: {settings.aws_region}")
    print(f"  AWS Endpoint: {settings.aws_endpoint_url}")
    print(f"  URL Expiration (minutes): {settings.storage_expiration}")
    print(f"  Queue Type: {settings.queue_type}")
    print(f"  SQS Queue URL: {settings.sqs_queue_url}")
    print(f"  Database: {settings.database_path}")


@cli.command()
def init_db():
    """Create the user tables"""
    Database(get_settings().database_path).init_db()


@cli.command()
@click.argument("class_name")
@click.option("--option", "-o", "pairs", multiple=True, help="Job option as KEY=VALUE (repeatable)")
@click.option("--created-by", type=int, default=None, help="Id of the user queuing the job")
def enqueue(class_name, pairs, created_by):
    """Queue a job for the worker"""
    queue = QueueFactory.get_queue_handler()
    dispatcher = JobDispatcher(queue, created_by=created_by)
    try:
        dispatcher.send(class_name, _parse_options(pairs))
    except ArchivistError as e:
        raise click.ClickException(str(e))
    print(f"Queued {class_name}")


@cli.command()
@click.option("--max-messages", type=int, default=None,
              help="Stop after this many messages, or when the queue is empty")
def worker(max_messages):
    """Run the job worker"""
    settings = get_settings()
    storage = create_storage_adapter(settings)
    storage.set_up()

    factory = JobFactory({
        "db": Database(settings.database_path),
        "storage": storage,
    })
    job_worker = JobWorker(
        QueueFactory.get_queue_handler(settings),
        factory,
        poll_interval=settings.worker_poll_interval,
    )
    try:
        handled = job_worker.run(max_messages=max_messages)
    except KeyboardInterrupt:
        job_worker.stop()
        return
    print(f"Handled {handled} message(s)")


@cli.command()
def storage_check():
    """Check that the configured storage backend is usable"""
    try:
        storage = create_storage_adapter()
    except ArchivistError as e:
        raise click.ClickException(str(e))

    if storage.can_store():
        print(f"✅ {type(storage).__name__} is ready")
    else:
        print(f"❌ {type(storage).__name__} cannot store files")
        sys.exit(1)


@cli.command()
@click.argument("key")
def uri(key):
    """Print the URL for a stored file"""
    try:
        print(create_storage_adapter().get_uri(key))
    except ArchivistError as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    cli()
