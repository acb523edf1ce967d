"""
Schedule-availability policy for doctors.

A doctor is schedule-available when the current weekday is one of their
working days and the current time of day lies within
``[first slot, last slot + consultation duration]`` (both ends inclusive).
"""
from django.conf import settings

from core.constants import DOCTOR_OFFLINE, WEEKDAYS


def slot_to_minutes(slot: str) -> int:
    """Convert a ``HH:MM`` slot label to minutes since midnight"""
    hours, minutes = slot.strip().split(':')[:2]
    return int(hours) * 60 + int(minutes)


def consultation_minutes(doctor) -> int:
    return doctor.consultation_duration or settings.DOCTOR_DEFAULT_CONSULTATION_MINUTES


def working_window(doctor):
    """Return (start, end) in minutes since midnight, or None without slots"""
    if not doctor.availability:
        return None
    slots = sorted(slot_to_minutes(slot) for slot in doctor.availability)
    return slots[0], slots[-1] + consultation_minutes(doctor)


def works_on(doctor, day) -> bool:
    weekday = WEEKDAYS[day.weekday()]
    return any(str(name).strip().lower() == weekday for name in doctor.working_days or [])


def is_schedule_available(doctor, local_now) -> bool:
    if not works_on(doctor, local_now.date()):
        return False

    window = working_window(doctor)
    if window is None:
        return False

    current = local_now.hour * 60 + local_now.minute
    start, end = window
    return start <= current <= end


def effective_status(doctor, local_now) -> str:
    """Stored status, or offline when the doctor is outside their schedule"""
    if not is_schedule_available(doctor, local_now):
        return DOCTOR_OFFLINE
    return doctor.status
