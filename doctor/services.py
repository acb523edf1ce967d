"""
Doctor Directory service.

Read-mostly access to doctor records for the scheduling engine. The only
writes made here are status transitions (manual updates and the
auto-offline policy); slots and working days are owned elsewhere.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Count

from core.clock import default_clock
from core.constants import DOCTOR_AVAILABLE, DOCTOR_BUSY, DOCTOR_OFFLINE, DOCTOR_STATUS_CHOICES
from core.exceptions import DoctorUnavailableError, NotFoundError, ValidationError
from .models import Doctor
from .schedule import effective_status, is_schedule_available

logger = logging.getLogger(__name__)

VALID_DOCTOR_STATUSES = {value for value, _ in DOCTOR_STATUS_CHOICES}


class DoctorDirectoryService:  # Lookup, status and statistics operations over doctors
    @staticmethod
    def get_doctor(doctor_id) -> Doctor:
        try:
            return Doctor.objects.get(pk=doctor_id)
        except (Doctor.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFoundError(f"Doctor with ID {doctor_id} not found")

    @staticmethod
    def find_active_doctor(doctor_id) -> Doctor:
        """Active doctor by id; NotFoundError when absent or inactive"""
        try:
            return Doctor.objects.get(pk=doctor_id, is_active=True)
        except (Doctor.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFoundError('Doctor not found or inactive')

    @staticmethod
    def require_active_doctor(doctor_id) -> Doctor:
        """
        Like find_active_doctor, but an existing inactive doctor raises
        DoctorUnavailableError instead of NotFoundError.
        """
        doctor = DoctorDirectoryService.get_doctor(doctor_id)
        if not doctor.is_active:
            raise DoctorUnavailableError(f"Doctor {doctor.name} is not active")
        return doctor

    @staticmethod
    def list_active_doctors():
        return list(Doctor.objects.filter(is_active=True))

    @staticmethod
    def is_schedule_available(doctor, clock=None) -> bool:
        clock = clock or default_clock
        return is_schedule_available(doctor, clock.local_now())

    @staticmethod
    def effective_status(doctor, clock=None) -> str:
        clock = clock or default_clock
        return effective_status(doctor, clock.local_now())

    @staticmethod
    def update_status(doctor_id, new_status) -> Doctor:
        if new_status not in VALID_DOCTOR_STATUSES:
            raise ValidationError(f"Invalid doctor status: {new_status}")

        doctor = DoctorDirectoryService.get_doctor(doctor_id)
        doctor.status = new_status
        doctor.save(update_fields=['status', 'updated_at'])
        logger.info(f"Doctor {doctor.id} status set to {new_status}")
        return doctor

    @staticmethod
    @transaction.atomic
    def sync_schedule_statuses(clock=None):
        """
        Auto-offline policy: active doctors marked available or busy who are
        outside their schedule are set offline. Returns the changed doctors.
        """
        clock = clock or default_clock
        local_now = clock.local_now()

        candidates = Doctor.objects.select_for_update().filter(
            is_active=True,
            status__in=[DOCTOR_AVAILABLE, DOCTOR_BUSY],
        )

        changed = []
        for doctor in candidates:
            if is_schedule_available(doctor, local_now):
                continue
            doctor.status = DOCTOR_OFFLINE
            doctor.save(update_fields=['status', 'updated_at'])
            changed.append(doctor)
            logger.info(f"Auto-updated {doctor.name} to offline (schedule ended)")

        return changed

    @staticmethod
    def get_stats() -> dict:
        doctors = Doctor.objects.all()

        specializations = (
            doctors.filter(is_active=True)
            .values('specialization')
            .annotate(count=Count('id'))
            .order_by('specialization')
        )

        return {
            'total_doctors': doctors.count(),
            'active_doctors': doctors.filter(is_active=True).count(),
            'available_doctors': doctors.filter(status=DOCTOR_AVAILABLE, is_active=True).count(),
            'busy_doctors': doctors.filter(status=DOCTOR_BUSY, is_active=True).count(),
            'offline_doctors': doctors.filter(status=DOCTOR_OFFLINE).count(),
            'specializations': [
                {'name': row['specialization'], 'count': row['count']}
                for row in specializations
            ],
        }
