"""
Appointment Conflict Detector.

Checks a proposed (doctor, date, time) triple in a fixed order:
the doctor exists and is active, the time is one of the doctor's slots,
and no other SCHEDULED appointment already holds the slot.
"""
import logging

from core.constants import APPOINTMENT_SCHEDULED
from core.exceptions import ConflictError, ValidationError
from doctor.services import DoctorDirectoryService
from .models import Appointment

logger = logging.getLogger(__name__)


class AppointmentConflictDetector:  # Slot validation shared by create, update and reschedule
    @staticmethod
    def validate(doctor_id, date, time, exclude_appointment_id=None):
        """
        Validate a slot for booking.

        Returns the active Doctor on success. Raises NotFoundError,
        ValidationError or ConflictError, in that order of checking.
        """
        doctor = DoctorDirectoryService.find_active_doctor(doctor_id)

        if time not in (doctor.availability or []):
            logger.info(f"Rejected booking for doctor {doctor.id} at {date} {time}: slot not in availability")
            raise ValidationError("Selected time is not in doctor's availability")

        clashes = Appointment.objects.filter(
            doctor=doctor,
            date=date,
            time=time,
            status=APPOINTMENT_SCHEDULED,
        )
        if exclude_appointment_id:
            clashes = clashes.exclude(pk=exclude_appointment_id)

        if clashes.exists():
            logger.info(f"Rejected booking for doctor {doctor.id} at {date} {time}: slot already taken")
            raise ConflictError('Doctor already has an appointment at this time')

        return doctor
