"""
Queue Management Service
Handles walk-in registration, queue ordering, patient calling and doctor assignment

This is the SINGLE source for queue management logic.
Import from here: from queue_management.services import QueueManagementService
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Count, Q

from core.clock import default_clock
from core.constants import (
    PRIORITY_CHOICES,
    PRIORITY_NORMAL,
    QUEUE_ACTIVE_STATUSES,
    QUEUE_CALLED,
    QUEUE_CANCELLED,
    QUEUE_COMPLETED,
    QUEUE_IN_CONSULTATION,
    QUEUE_NO_SHOW,
    QUEUE_STATUS_CHOICES,
    QUEUE_WAITING,
)
from core.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    UnassignedQueueError,
    ValidationError,
)
from doctor.assignment import select_optimal_doctor
from doctor.schedule import consultation_minutes
from doctor.services import DoctorDirectoryService
from .escalation import effective_priority, order_entries
from .filters import QueueEntryFilter
from .models import QueueEntry
from .sequence import QueueNumberAllocator

logger = logging.getLogger(__name__)

VALID_PRIORITIES = {value for value, _ in PRIORITY_CHOICES}
VALID_QUEUE_STATUSES = {value for value, _ in QUEUE_STATUS_CHOICES}

# Status machine: terminal states have no outgoing transitions
ALLOWED_TRANSITIONS = {
    QUEUE_WAITING: {QUEUE_CALLED, QUEUE_CANCELLED, QUEUE_NO_SHOW},
    QUEUE_CALLED: {QUEUE_IN_CONSULTATION, QUEUE_CANCELLED, QUEUE_NO_SHOW},
    QUEUE_IN_CONSULTATION: {QUEUE_COMPLETED, QUEUE_CANCELLED, QUEUE_NO_SHOW},
}

EDITABLE_FIELDS = ('patient_name', 'patient_phone', 'patient_age', 'priority', 'reason', 'notes')


def apply_transition(entry, new_status, now):
    """Validate and apply a status change in memory, stamping timestamps"""
    if new_status not in VALID_QUEUE_STATUSES:
        raise ValidationError(f"Invalid queue status: {new_status}")

    if new_status not in ALLOWED_TRANSITIONS.get(entry.status, set()):
        raise InvalidTransitionError(
            f"Cannot move queue entry #{entry.queue_number} from {entry.status} to {new_status}"
        )

    if new_status == QUEUE_CALLED:
        entry.called_at = now
    elif new_status == QUEUE_IN_CONSULTATION:
        entry.consultation_started_at = now
    elif new_status == QUEUE_COMPLETED:
        if not entry.consultation_started_at:
            entry.consultation_started_at = now
        entry.consultation_ended_at = now

    entry.status = new_status
    return entry


class QueueManagementService:
    """Walk-in queue operations"""

    @staticmethod
    def get_entry(entry_id, for_update=False) -> QueueEntry:
        queryset = QueueEntry.objects.select_for_update() if for_update else QueueEntry.objects
        try:
            return queryset.get(pk=entry_id)
        except (QueueEntry.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFoundError(f"Queue item with ID {entry_id} not found")

    @staticmethod
    def find_by_queue_number(queue_number, queue_date=None, clock=None) -> QueueEntry:
        clock = clock or default_clock
        queue_date = queue_date or clock.today()
        try:
            return QueueEntry.objects.select_related('doctor').get(
                queue_number=queue_number, queue_date=queue_date
            )
        except (QueueEntry.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFoundError(f"Queue item with number {queue_number} not found")

    @staticmethod
    def create_entry(data: dict, clock=None, allocator=None) -> QueueEntry:
        """
        Register a walk-in patient.

        Args:
            data: patient_name, patient_phone and optionally patient_age,
                priority, reason, notes, doctor_id
            clock: time source deciding the queue date
            allocator: QueueNumberAllocator override

        Returns:
            The new WAITING QueueEntry carrying today's next queue number
        """
        clock = clock or default_clock
        allocator = allocator or QueueNumberAllocator()

        priority = data.get('priority') or PRIORITY_NORMAL
        if priority not in VALID_PRIORITIES:
            raise ValidationError(f"Invalid priority: {priority}")

        doctor = None
        if data.get('doctor_id'):
            doctor = DoctorDirectoryService.require_active_doctor(data['doctor_id'])

        now = clock.now()
        entry = allocator.allocate(
            clock.today(),
            patient_name=data['patient_name'],
            patient_phone=data['patient_phone'],
            patient_age=data.get('patient_age'),
            priority=priority,
            reason=data.get('reason') or '',
            notes=data.get('notes') or '',
            doctor=doctor,
            status=QUEUE_WAITING,
            created_at=now,
        )

        logger.info(
            f"Queue entry #{entry.queue_number} created for {entry.queue_date} "
            f"(priority={entry.priority}, doctor={entry.doctor_id})"
        )
        return entry

    @staticmethod
    def list_entries(status=None, doctor_id=None, priority=None, active_only=False, clock=None):
        """Entries ordered by effective priority, then arrival"""
        clock = clock or default_clock
        params = {
            'status': status,
            'doctor_id': doctor_id,
            'priority': priority,
            'active_only': active_only,
        }
        filterset = QueueEntryFilter(
            {key: value for key, value in params.items() if value},
            queryset=QueueEntry.objects.select_related('doctor'),
        )
        if not filterset.is_valid():
            raise ValidationError(f"Invalid queue filters: {dict(filterset.errors)}")

        return order_entries(filterset.qs, clock.now())

    @staticmethod
    def get_active_queue(clock=None):
        return QueueManagementService.list_entries(active_only=True, clock=clock)

    @staticmethod
    def get_waiting_queue(clock=None):
        return QueueManagementService.list_entries(status=QUEUE_WAITING, clock=clock)

    @staticmethod
    @transaction.atomic
    def update_entry(entry_id, data: dict) -> QueueEntry:
        entry = QueueManagementService.get_entry(entry_id, for_update=True)
        if entry.is_terminal:
            raise ValidationError(f"Queue entry #{entry.queue_number} is {entry.status} and can no longer change")

        if 'priority' in data and data['priority'] not in VALID_PRIORITIES:
            raise ValidationError(f"Invalid priority: {data['priority']}")

        if 'doctor_id' in data:
            if data['doctor_id'] is None:
                entry.doctor = None
            else:
                entry.doctor = DoctorDirectoryService.require_active_doctor(data['doctor_id'])

        for field in EDITABLE_FIELDS:
            if field in data:
                setattr(entry, field, data[field])

        entry.save()
        return entry

    @staticmethod
    @transaction.atomic
    def transition_status(entry_id, new_status, clock=None) -> QueueEntry:
        clock = clock or default_clock
        entry = QueueManagementService.get_entry(entry_id, for_update=True)
        previous = entry.status

        apply_transition(entry, new_status, clock.now())
        entry.save()

        logger.info(f"Queue entry #{entry.queue_number} moved from {previous} to {new_status}")
        return entry

    @staticmethod
    @transaction.atomic
    def call_next(doctor_id=None, clock=None):
        """
        Call the next waiting patient.

        With a doctor, candidates are that doctor's waiting patients plus the
        unassigned ones; an unassigned winner is assigned to the doctor.
        Without a doctor, only already-assigned patients are eligible.

        Returns the called QueueEntry, or None when nobody is waiting.
        Raises UnassignedQueueError when patients wait but none has a doctor.
        """
        clock = clock or default_clock
        now = clock.now()
        waiting = QueueEntry.objects.select_for_update().filter(status=QUEUE_WAITING)

        doctor = None
        if doctor_id:
            doctor = DoctorDirectoryService.find_active_doctor(doctor_id)
            candidates = list(waiting.filter(Q(doctor=doctor) | Q(doctor__isnull=True)))
        else:
            candidates = list(waiting.filter(doctor__isnull=False))
            if not candidates and waiting.exists():
                raise UnassignedQueueError(
                    'Patients are waiting but no doctors are assigned to them'
                )

        if not candidates:
            logger.info(f"Call next (doctor={doctor_id}): no patients waiting")
            return None

        entry = order_entries(candidates, now)[0]
        if doctor and entry.doctor_id is None:
            entry.doctor = doctor

        apply_transition(entry, QUEUE_CALLED, now)
        entry.save()

        logger.info(
            f"Called queue entry #{entry.queue_number} "
            f"(effective priority {effective_priority(entry, now)}, doctor={entry.doctor_id})"
        )
        return entry

    @staticmethod
    @transaction.atomic
    def assign_doctor(entry_id, doctor_id) -> QueueEntry:
        entry = QueueManagementService.get_entry(entry_id, for_update=True)
        if entry.is_terminal:
            raise ValidationError(f"Queue entry #{entry.queue_number} is {entry.status} and can no longer change")

        entry.doctor = DoctorDirectoryService.require_active_doctor(doctor_id)
        entry.save(update_fields=['doctor', 'updated_at'])

        logger.info(f"Queue entry #{entry.queue_number} assigned to doctor {entry.doctor_id}")
        return entry

    @staticmethod
    def doctor_workloads() -> dict:
        """Number of active queue entries per assigned doctor id"""
        rows = (
            QueueEntry.objects.filter(status__in=QUEUE_ACTIVE_STATUSES, doctor__isnull=False)
            .values('doctor')
            .annotate(total=Count('id'))
            .order_by()
        )
        return {row['doctor']: row['total'] for row in rows}

    @staticmethod
    def select_optimal_doctor(clock=None):
        clock = clock or default_clock
        return select_optimal_doctor(
            DoctorDirectoryService.list_active_doctors(),
            QueueManagementService.doctor_workloads(),
            clock.local_now(),
        )

    @staticmethod
    def auto_assign_doctor(entry_id, clock=None) -> QueueEntry:
        doctor = QueueManagementService.select_optimal_doctor(clock=clock)
        if doctor is None:
            raise ValidationError('No doctor is currently available for assignment', code='no_doctor_available')
        return QueueManagementService.assign_doctor(entry_id, doctor.pk)

    @staticmethod
    def remove_entry(entry_id):
        entry = QueueManagementService.get_entry(entry_id)
        entry.delete()
        logger.info(f"Queue entry #{entry.queue_number} ({entry.queue_date}) deleted")

    @staticmethod
    def get_queue_position(entry_id, clock=None) -> dict:
        """Detailed queue position for a waiting patient"""
        clock = clock or default_clock
        entry = QueueManagementService.get_entry(entry_id)

        waiting = QueueEntry.objects.filter(status=QUEUE_WAITING).select_related('doctor')
        if entry.doctor_id:
            waiting = waiting.filter(Q(doctor_id=entry.doctor_id) | Q(doctor__isnull=True))

        ordered = order_entries(waiting, clock.now())
        ahead = next(
            (index for index, other in enumerate(ordered) if other.pk == entry.pk),
            0,
        )

        per_patient = consultation_minutes(entry.doctor) if entry.doctor else None
        return {
            'queue_number': entry.queue_number,
            'queue_date': str(entry.queue_date),
            'status': entry.status,
            'people_ahead': ahead if entry.status == QUEUE_WAITING else 0,
            'total_waiting': len(ordered),
            'estimated_wait_time': ahead * per_patient if per_patient and entry.status == QUEUE_WAITING else None,
            'effective_priority': effective_priority(entry, clock.now()),
        }
