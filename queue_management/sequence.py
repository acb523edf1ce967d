"""
Daily queue number allocation.

Numbers restart at 1 every calendar day. The read of the current maximum
and the insert of the new entry happen in one transaction; the database
unique constraint on (queue_number, queue_date) catches two writers that
read the same maximum, and the loser retries with a growing backoff. A
lock timeout from the database counts against the same attempt budget.
"""
import logging
import time

from django.conf import settings
from django.db import IntegrityError, OperationalError, transaction
from django.db.models import Max

from core.exceptions import ConflictError
from .models import QueueEntry

logger = logging.getLogger(__name__)


def next_queue_number(queue_date) -> int:
    current = QueueEntry.objects.filter(queue_date=queue_date).aggregate(
        Max('queue_number')
    )['queue_number__max']
    return (current or 0) + 1


class QueueNumberAllocator:  # Issues unique per-day queue numbers under concurrent inserts
    def __init__(self, max_attempts=None, backoff_ms=None, sleep=time.sleep):
        self.max_attempts = max_attempts or settings.QUEUE_ALLOCATION_MAX_ATTEMPTS
        self.backoff_ms = settings.QUEUE_ALLOCATION_BACKOFF_MS if backoff_ms is None else backoff_ms
        self.sleep = sleep

    def allocate(self, queue_date, **fields) -> QueueEntry:
        """
        Create a QueueEntry for ``queue_date`` with the next free number.

        Raises ConflictError once every attempt has collided.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                with transaction.atomic():
                    queue_number = next_queue_number(queue_date)
                    return QueueEntry.objects.create(
                        queue_number=queue_number,
                        queue_date=queue_date,
                        **fields,
                    )
            except (IntegrityError, OperationalError) as exc:
                if attempt >= self.max_attempts:
                    break
                logger.warning(
                    f"Queue number allocation failed for {queue_date} ({exc.__class__.__name__}), retrying... "
                    f"(attempt {attempt}/{self.max_attempts})"
                )
                self.sleep(self.backoff_ms * attempt / 1000.0)

        logger.error(
            f"Unable to allocate queue number for {queue_date} after {self.max_attempts} attempts"
        )
        raise ConflictError('Unable to generate unique queue number after multiple attempts')
