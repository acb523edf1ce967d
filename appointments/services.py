import logging
from datetime import timedelta

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from core.clock import default_clock
from core.constants import (
    APPOINTMENT_CANCELLED,
    APPOINTMENT_COMPLETED,
    APPOINTMENT_SCHEDULED,
    APPOINTMENT_STATUS_CHOICES,
    PRIORITY_CHOICES,
)
from core.exceptions import ConflictError, NotFoundError, ValidationError
from .conflicts import AppointmentConflictDetector
from .filters import AppointmentFilter
from .models import Appointment

logger = logging.getLogger(__name__)

VALID_APPOINTMENT_STATUSES = {value for value, _ in APPOINTMENT_STATUS_CHOICES}
VALID_PRIORITIES = {value for value, _ in PRIORITY_CHOICES}

EDITABLE_FIELDS = (
    'patient_name', 'patient_phone', 'patient_email', 'patient_age', 'patient_gender',
    'priority', 'notes', 'symptoms', 'diagnosis', 'prescription',
    'consultation_fee', 'is_follow_up', 'follow_up_date',
)
SLOT_FIELDS = ('doctor_id', 'date', 'time')


def _save_slot(appointment, **save_kwargs):
    """Persist a slot change, reporting the double-booking constraint as a conflict"""
    try:
        with transaction.atomic():
            appointment.save(**save_kwargs)
    except IntegrityError:
        logger.info(
            f"Rejected booking for doctor {appointment.doctor_id} at "
            f"{appointment.date} {appointment.time}: slot taken concurrently"
        )
        raise ConflictError('Doctor already has an appointment at this time')
    return appointment


class AppointmentService:  # Service class for Appointment operations
    @staticmethod
    def create_appointment(data: dict) -> Appointment:  # Create appointment
        """
        Book an appointment after running the conflict detector.

        ``data`` carries the patient fields plus ``doctor_id``, ``date`` and
        ``time``; the new appointment is always SCHEDULED.
        """
        priority = data.get('priority')
        if priority and priority not in VALID_PRIORITIES:
            raise ValidationError(f"Invalid priority: {priority}")

        doctor = AppointmentConflictDetector.validate(data['doctor_id'], data['date'], data['time'])

        appointment = Appointment(
            doctor=doctor,
            date=data['date'],
            time=data['time'],
            status=APPOINTMENT_SCHEDULED,
            **{field: data[field] for field in EDITABLE_FIELDS if field in data},
        )
        _save_slot(appointment, force_insert=True)

        logger.info(f"Appointment {appointment.id} booked with doctor {doctor.id} on {appointment.date} at {appointment.time}")
        return appointment

    @staticmethod
    def get_appointment(pk) -> Appointment:  # Get appointment
        try:
            return Appointment.objects.select_related('doctor').get(pk=pk)
        except (Appointment.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFoundError(f"Appointment with ID {pk} not found")

    @staticmethod
    def list_appointments(doctor_id=None, date=None, status=None, patient_name=None,
                          date_from=None, date_to=None):
        """Appointments ordered by date then time"""
        params = {
            'doctor_id': doctor_id,
            'date': date,
            'status': status,
            'patient_name': patient_name,
            'date_from': date_from,
            'date_to': date_to,
        }
        filterset = AppointmentFilter(
            {key: value for key, value in params.items() if value},
            queryset=Appointment.objects.select_related('doctor'),
        )
        if not filterset.is_valid():
            raise ValidationError(f"Invalid appointment filters: {dict(filterset.errors)}")

        return filterset.qs.order_by('date', 'time')

    @staticmethod
    def list_doctor_appointments(doctor_id, date=None):
        return AppointmentService.list_appointments(doctor_id=doctor_id, date=date)

    @staticmethod
    def list_today_appointments(clock=None):
        clock = clock or default_clock
        return AppointmentService.list_appointments(date=clock.today())

    @staticmethod
    def list_upcoming_appointments(days=7, clock=None):
        """SCHEDULED appointments from today through today + days"""
        clock = clock or default_clock
        today = clock.today()
        return AppointmentService.list_appointments(
            status=APPOINTMENT_SCHEDULED,
            date_from=today,
            date_to=today + timedelta(days=days),
        )

    @staticmethod
    def update_appointment(pk, data: dict) -> Appointment:  # Update appointment
        appointment = AppointmentService.get_appointment(pk)

        if 'priority' in data and data['priority'] not in VALID_PRIORITIES:
            raise ValidationError(f"Invalid priority: {data['priority']}")

        if any(data.get(field) for field in SLOT_FIELDS):
            doctor = AppointmentConflictDetector.validate(
                data.get('doctor_id') or appointment.doctor_id,
                data.get('date') or appointment.date,
                data.get('time') or appointment.time,
                exclude_appointment_id=appointment.pk,
            )
            appointment.doctor = doctor
            appointment.date = data.get('date') or appointment.date
            appointment.time = data.get('time') or appointment.time

        for field in EDITABLE_FIELDS:
            if field in data:
                setattr(appointment, field, data[field])

        return _save_slot(appointment)

    @staticmethod
    def update_status(pk, new_status) -> Appointment:
        if new_status not in VALID_APPOINTMENT_STATUSES:
            raise ValidationError(f"Invalid appointment status: {new_status}")

        appointment = AppointmentService.get_appointment(pk)
        previous = appointment.status
        appointment.status = new_status
        if new_status == APPOINTMENT_COMPLETED:
            appointment.completed_at = timezone.now()
        elif new_status == APPOINTMENT_CANCELLED:
            appointment.cancelled_at = timezone.now()

        _save_slot(appointment)
        logger.info(f"Appointment {appointment.id} moved from {previous} to {new_status}")
        return appointment

    @staticmethod
    def cancel_appointment(pk, reason=None) -> Appointment:
        appointment = AppointmentService.get_appointment(pk)

        if appointment.status == APPOINTMENT_COMPLETED:
            raise ValidationError('Cannot cancel a completed appointment')

        appointment.status = APPOINTMENT_CANCELLED
        appointment.cancelled_at = timezone.now()
        if reason:
            line = f"Cancellation reason: {reason}"
            appointment.notes = f"{appointment.notes}\n{line}" if appointment.notes else line

        appointment.save()
        logger.info(f"Appointment {appointment.id} cancelled")
        return appointment

    @staticmethod
    def reschedule_appointment(pk, new_date, new_time) -> Appointment:
        appointment = AppointmentService.get_appointment(pk)

        if appointment.status != APPOINTMENT_SCHEDULED:
            raise ValidationError('Can only reschedule scheduled appointments')

        AppointmentConflictDetector.validate(
            appointment.doctor_id,
            new_date,
            new_time,
            exclude_appointment_id=appointment.pk,
        )

        appointment.date = new_date
        appointment.time = new_time
        _save_slot(appointment)

        logger.info(f"Appointment {appointment.id} rescheduled to {new_date} at {new_time}")
        return appointment

    @staticmethod
    def delete_appointment(pk):  # Delete appointment
        appointment = AppointmentService.get_appointment(pk)
        appointment.delete()
        logger.info(f"Appointment {pk} deleted")

    @staticmethod
    def get_stats(clock=None) -> dict:
        """Totals per status plus today's and this week's (Sunday to Saturday) counts"""
        clock = clock or default_clock
        today = clock.today()
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)
        week_end = week_start + timedelta(days=6)

        appointments = Appointment.objects.all()
        stats = {'total': appointments.count()}
        for value, _ in APPOINTMENT_STATUS_CHOICES:
            stats[value] = appointments.filter(status=value).count()
        stats['today'] = appointments.filter(date=today).count()
        stats['this_week'] = appointments.filter(date__range=(week_start, week_end)).count()
        return stats
