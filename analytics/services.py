"""
Statistics Aggregator.

Combines queue entries, appointments and the doctor directory into the
operational metrics shown on the front-desk dashboard.
"""
import logging

from django.db.models import Count

from appointments.models import Appointment
from core.clock import default_clock
from core.constants import (
    APPOINTMENT_COMPLETED,
    APPOINTMENT_STATUS_CHOICES,
    PRIORITY_URGENT,
    QUEUE_CALLED,
    QUEUE_CANCELLED,
    QUEUE_COMPLETED,
    QUEUE_IN_CONSULTATION,
    QUEUE_NO_SHOW,
    QUEUE_STATUS_CHOICES,
    QUEUE_WAITING,
)
from doctor.services import DoctorDirectoryService
from queue_management.escalation import effective_priority, is_escalated
from queue_management.models import QueueEntry

logger = logging.getLogger(__name__)


def average_wait_minutes(entries) -> int:
    """Mean of consultation start minus arrival, rounded to whole minutes; 0 when empty"""
    waits = [
        (entry.consultation_started_at - entry.created_at).total_seconds() / 60
        for entry in entries
        if entry.consultation_started_at
    ]
    if not waits:
        return 0
    return int(round(sum(waits) / len(waits)))


def urgency_counts(waiting_entries, now):
    """
    Return (urgent, escalated) for WAITING entries.

    Urgent counts entries stored as URGENT plus entries escalated to URGENT
    from a lower priority; escalated counts every entry whose effective
    priority is above its stored one.
    """
    urgent = 0
    escalated = 0
    for entry in waiting_entries:
        if entry.priority == PRIORITY_URGENT:
            urgent += 1
        elif effective_priority(entry, now) == PRIORITY_URGENT:
            urgent += 1
        if is_escalated(entry, now):
            escalated += 1
    return urgent, escalated


def _status_counts(queryset, choices):
    counts = {value: 0 for value, _ in choices}
    for row in queryset.values('status').annotate(total=Count('id')).order_by():
        counts[row['status']] = row['total']
    return counts


class StatisticsService:  # Day-scoped operational statistics for queue and appointments
    @staticmethod
    def get_queue_stats(day=None, clock=None) -> dict:
        """
        Queue statistics for ``day`` (defaults to today).

        ``completed_today`` adds queue completions and appointment
        completions for the day; the two record sets are independent and
        are not deduplicated.
        """
        clock = clock or default_clock
        day = day or clock.today()
        now = clock.now()

        entries = QueueEntry.objects.filter(queue_date=day)
        by_status = _status_counts(entries, QUEUE_STATUS_CHOICES)

        started = entries.filter(consultation_started_at__isnull=False)
        waiting = list(entries.filter(status=QUEUE_WAITING))
        urgent, escalated = urgency_counts(waiting, now)

        completed_appointments = Appointment.objects.filter(
            date=day, status=APPOINTMENT_COMPLETED
        ).count()
        doctors = DoctorDirectoryService.get_stats()

        stats = {
            'date': str(day),
            'total_patients': sum(by_status.values()),
            'today_appointments': Appointment.objects.filter(date=day).count(),
            'queue_length': by_status[QUEUE_WAITING],
            'waiting': by_status[QUEUE_WAITING],
            'called': by_status[QUEUE_CALLED],
            'in_consultation': by_status[QUEUE_IN_CONSULTATION],
            'completed': by_status[QUEUE_COMPLETED],
            'cancelled': by_status[QUEUE_CANCELLED],
            'no_show': by_status[QUEUE_NO_SHOW],
            'completed_today': by_status[QUEUE_COMPLETED] + completed_appointments,
            'average_wait_time': average_wait_minutes(started),
            'urgent_patients': urgent,
            'escalated_patients': escalated,
            'available_doctors': doctors['available_doctors'],
            'busy_doctors': doctors['busy_doctors'],
            'offline_doctors': doctors['offline_doctors'],
            'total_doctors': doctors['total_doctors'],
        }
        logger.debug(f"Queue stats for {day}: {stats}")
        return stats

    @staticmethod
    def get_appointment_stats(day=None, clock=None) -> dict:
        """Appointment counts per status for ``day`` (defaults to today)"""
        clock = clock or default_clock
        day = day or clock.today()

        appointments = Appointment.objects.filter(date=day)
        stats = {'date': str(day), 'total': appointments.count()}
        stats.update(_status_counts(appointments, APPOINTMENT_STATUS_CHOICES))
        return stats

    @staticmethod
    def get_overview(day=None, clock=None) -> dict:
        return {
            'queue': StatisticsService.get_queue_stats(day=day, clock=clock),
            'appointments': StatisticsService.get_appointment_stats(day=day, clock=clock),
            'doctors': DoctorDirectoryService.get_stats(),
        }
