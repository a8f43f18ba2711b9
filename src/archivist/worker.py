"""
Queue consumer that turns job messages into jobs and runs them.

Every message ends up either performed or dead-lettered with the reason;
none are dropped.
"""

import logging
import time
from typing import Optional

from archivist.exceptions import JobError
from archivist.jobs.base import BaseJob
from archivist.jobs.factory import JobFactory
from archivist.queue import BaseQueue
from archivist.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)


@log_execution_time(label=lambda job: type(job).__name__)
def perform_job(job: BaseJob) -> None:
    job.perform()


class JobWorker:
    """Pulls job messages off a queue and performs them one at a time."""

    def __init__(self, queue: BaseQueue, factory: JobFactory, poll_interval: float = 1.0):
        self.queue = queue
        self.factory = factory
        self.poll_interval = poll_interval
        self._running = False

    def handle(self, message: str) -> bool:
        """Build and perform the job in *message*.

        Returns:
            True if the job ran, False if it was dead-lettered.
        """
        try:
            job = self.factory.from_message(message)
        except JobError as e:
            logger.error(f"Rejected job message ({type(e).__name__}): {str(e)}")
            self.queue.dead_letter(message, f"{type(e).__name__}: {str(e)}")
            return False
        except Exception as e:
            # The queue has already released the message.
            logger.exception("Could not build job from message")
            self.queue.dead_letter(message, f"{type(e).__name__}: {str(e)}")
            return False

        try:
            perform_job(job)
        except Exception as e:
            logger.exception(f"Job {type(job).__name__} failed")
            self.queue.dead_letter(message, f"{type(e).__name__}: {str(e)}")
            return False

        return True

    def run_once(self) -> Optional[bool]:
        """Handle the next message, if any. Returns None when the queue was empty."""
        message = self.queue.get_task()
        if message is None:
            return None
        return self.handle(message)

    def run(self, max_messages: Optional[int] = None) -> int:
        """Process messages until stopped or *max_messages* have been handled.

        Returns:
            Number of messages handled.
        """
        self._running = True
        handled = 0
        logger.info("Worker started")
        try:
            while self._running and (max_messages is None or handled < max_messages):
                outcome = self.run_once()
                if outcome is None:
                    if max_messages is not None:
                        break
                    time.sleep(self.poll_interval)
                    continue
                handled += 1
        finally:
            self._running = False
            logger.info(f"Worker stopped after {handled} message(s)")
        return handled

    def stop(self) -> None:
        self._running = False
