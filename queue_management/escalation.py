"""
Wait-time priority escalation.

The effective priority is derived at read time from ``created_at`` and the
current time; the stored ``priority`` field is never overwritten.
"""
from django.conf import settings

from core.constants import (
    PRIORITY_HIGH,
    PRIORITY_NORMAL,
    PRIORITY_RANK,
    PRIORITY_URGENT,
    QUEUE_ACTIVE_STATUSES,
)


def wait_minutes(entry, now) -> int:
    """Whole minutes elapsed since the entry was created"""
    elapsed = (now - entry.created_at).total_seconds()
    return max(0, int(elapsed // 60))


def escalate(priority, minutes_waited):
    """Apply the wait thresholds to an original priority; never lowers it"""
    if minutes_waited >= settings.QUEUE_ESCALATION_URGENT_MINUTES:
        escalated = PRIORITY_URGENT
    elif minutes_waited >= settings.QUEUE_ESCALATION_HIGH_MINUTES:
        escalated = PRIORITY_HIGH
    elif minutes_waited >= settings.QUEUE_ESCALATION_NORMAL_MINUTES:
        escalated = PRIORITY_NORMAL
    else:
        return priority

    if PRIORITY_RANK[escalated] < PRIORITY_RANK[priority]:
        return priority
    return escalated


def effective_priority(entry, now):
    if entry.status not in QUEUE_ACTIVE_STATUSES:
        return entry.priority
    return escalate(entry.priority, wait_minutes(entry, now))


def is_escalated(entry, now) -> bool:
    return PRIORITY_RANK[effective_priority(entry, now)] > PRIORITY_RANK[entry.priority]


def call_order_key(entry, now):
    """Sort key: effective priority descending, then first come first served"""
    return (-PRIORITY_RANK[effective_priority(entry, now)], entry.created_at, entry.queue_number)


def order_entries(entries, now):
    return sorted(entries, key=lambda entry: call_order_key(entry, now))
