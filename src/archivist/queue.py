import json
import logging
import os
import time
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import boto3

from archivist.settings import Settings, get_settings

if TYPE_CHECKING:
    from mypy_boto3_sqs import SQSClient

logger = logging.getLogger(__name__)


class BaseQueue:
    """Base class for job message transports (to be extended by specific implementations)"""
    def add_task(self, message: str) -> None:
        raise NotImplementedError

    def get_task(self) -> Optional[str]:
        raise NotImplementedError

    def dead_letter(self, message: str, reason: str) -> None:
        raise NotImplementedError


class LocalQueue(BaseQueue):
    """Handles local queue using file system for IPC"""
    def __init__(self, queue_dir="queue_data"):
        self.queue_dir = Path(queue_dir)
        self.queue_dir.mkdir(parents=True, exist_ok=True)
        self.error_dir = self.queue_dir / "errors"
        self._counter = 0
        logger.info("LocalQueue initialized at: %s", self.queue_dir)

    def _next_filename(self) -> str:
        # Timestamp first so sorting by name gives arrival order.
        self._counter += 1
        return f"{time.time_ns()}_{os.getpid()}_{self._counter:06d}.json"

    def add_task(self, message: str) -> None:
        """Add task to queue"""
        filepath = self.queue_dir / self._next_filename()
        tmp_path = filepath.with_suffix(".tmp")
        tmp_path.write_text(message, encoding="utf-8")
        tmp_path.rename(filepath)
        logger.info("Added task to queue: %s", filepath.name)

    def get_task(self) -> Optional[str]:
        """Get next task from queue"""
        for task_file in sorted(self.queue_dir.glob("*.json")):
            try:
                message = task_file.read_text(encoding="utf-8")
                task_file.unlink()
            except FileNotFoundError:
                # Taken by another worker between glob and read.
                continue
            logger.info("Retrieved task from queue: %s", task_file.name)
            return message
        return None

    def dead_letter(self, message: str, reason: str) -> None:
        """Move a message that could not be run to the errors directory"""
        self.error_dir.mkdir(exist_ok=True)
        filepath = self.error_dir / self._next_filename()
        filepath.write_text(json.dumps({"message": message, "reason": reason}), encoding="utf-8")
        logger.error("Dead-lettered task %s: %s", filepath.name, reason)


class SQSQueue(BaseQueue):
    """Handles AWS SQS queue"""
    def __init__(self, client: "SQSClient", queue_url: str, dead_letter_url: Optional[str] = None,
                 wait_time_seconds: int = 5):
        self.sqs = client
        self.queue_url = queue_url
        self.dead_letter_url = dead_letter_url
        self.wait_time_seconds = wait_time_seconds

        logger.info(f"SQSQueue initialized")
        logger.info(f"  Queue URL: {self.queue_url}")
        logger.info(f"  Dead letter URL: {self.dead_letter_url}")

    def add_task(self, message: str) -> None:
        """Add a task to the SQS queue."""
        response = self.sqs.send_message(QueueUrl=self.queue_url, MessageBody=message)
        logger.info(f"Task added to SQS queue with ID: {response.get('MessageId')}")

    def get_task(self) -> Optional[str]:
        messages = self.sqs.receive_message(
            QueueUrl=self.queue_url,
            MaxNumberOfMessages=1,
            WaitTimeSeconds=self.wait_time_seconds,
        )
        if "Messages" in messages:
            message = messages["Messages"][0]
            self.sqs.delete_message(
                QueueUrl=self.queue_url,
                ReceiptHandle=message["ReceiptHandle"],
            )
            logger.info(f"Retrieved task from SQS queue: {message.get('MessageId')}")
            return message["Body"]
        return None

    def dead_letter(self, message: str, reason: str) -> None:
        if not self.dead_letter_url:
            logger.error(f"Dropping failed task (no dead letter queue configured): {reason}: {message}")
            return
        self.sqs.send_message(
            QueueUrl=self.dead_letter_url,
            MessageBody=message,
            MessageAttributes={"reason": {"DataType": "String", "StringValue": reason[:1024]}},
        )
        logger.error(f"Dead-lettered task: {reason}")


class QueueFactory:
    """Factory to initialize the correct queue handler based on settings"""

    @staticmethod
    def get_queue_handler(settings: Optional[Settings] = None, client=None) -> BaseQueue:
        settings = settings or get_settings()

        logger.info(f"Creating queue handler for type: {settings.queue_type}")
        if settings.queue_type == "sqs":
            if not settings.sqs_queue_url:
                raise ValueError("SQS_QUEUE_URL must be set to use the sqs queue")
            if not settings.sqs_dead_letter_url:
                # get_task deletes on receipt; failed messages survive only as dead letters.
                raise ValueError("SQS_DEAD_LETTER_URL must be set to use the sqs queue")
            client = client or boto3.client(
                "sqs",
                endpoint_url=settings.aws_endpoint_url,
                aws_access_key_id=settings.aws_access_key_id,
                aws_secret_access_key=settings.aws_secret_access_key,
                region_name=settings.aws_region,
            )
            return SQSQueue(client, settings.sqs_queue_url, settings.sqs_dead_letter_url)
        return LocalQueue(settings.queue_dir)
