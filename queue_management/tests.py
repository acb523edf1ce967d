from datetime import datetime, timedelta, timezone as dt_timezone
from unittest.mock import Mock, patch

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from core.clock import FixedClock
from core.exceptions import (
    ConflictError,
    DoctorUnavailableError,
    InvalidTransitionError,
    NotFoundError,
    UnassignedQueueError,
    ValidationError,
)
from doctor.models import Doctor
from .escalation import effective_priority, escalate, is_escalated, order_entries, wait_minutes
from .models import QueueEntry
from .sequence import QueueNumberAllocator
from .services import QueueManagementService

# Monday morning, inside the default test doctor's schedule
MONDAY_10AM = datetime(2024, 3, 4, 10, 0, tzinfo=dt_timezone.utc)


def make_doctor(email, **overrides):
    fields = {
        'name': email.split('@')[0].title(),
        'specialization': 'General Medicine',
        'email': email,
        'availability': ['09:00', '09:30', '10:00', '16:00'],
        'working_days': ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday'],
    }
    fields.update(overrides)
    return Doctor.objects.create(**fields)


def walk_in(name, clock, **extra):
    data = {'patient_name': name, 'patient_phone': '+22990000000'}
    data.update(extra)
    return QueueManagementService.create_entry(data, clock=clock)


class QueueNumberAllocatorTest(TestCase):  # QueueNumberAllocatorTest class implementation
    def setUp(self):  # Setup
        self.clock = FixedClock(MONDAY_10AM)

    def test_numbers_are_sequential_per_day(self):  # Test numbers are sequential per day
        first = walk_in('Ada', self.clock)
        second = walk_in('Bola', self.clock)
        self.assertEqual(first.queue_number, 1)
        self.assertEqual(second.queue_number, 2)
        self.assertEqual(first.queue_date, second.queue_date)

    def test_numbering_restarts_next_day(self):  # Test numbering restarts next day
        walk_in('Ada', self.clock)
        walk_in('Bola', self.clock)
        self.clock.advance(timedelta(days=1))
        entry = walk_in('Chidi', self.clock)
        self.assertEqual(entry.queue_number, 1)

    def test_numbers_reused_after_deleting_highest(self):  # Test numbers reused after deleting highest
        walk_in('Ada', self.clock)
        second = walk_in('Bola', self.clock)
        QueueManagementService.remove_entry(second.id)
        self.assertEqual(walk_in('Chidi', self.clock).queue_number, 2)

    def test_collision_retries_with_backoff(self):  # Test collision retries with backoff
        existing = walk_in('Ada', self.clock)
        sleep = Mock()
        allocator = QueueNumberAllocator(max_attempts=3, backoff_ms=100, sleep=sleep)

        with patch('queue_management.sequence.next_queue_number', side_effect=[1, 2]):
            entry = allocator.allocate(
                existing.queue_date,
                patient_name='Bola',
                patient_phone='+22990000001',
                created_at=self.clock.now(),
            )

        self.assertEqual(entry.queue_number, 2)
        sleep.assert_called_once_with(0.1)

    def test_exhausted_attempts_raise_conflict(self):  # Test exhausted attempts raise conflict
        existing = walk_in('Ada', self.clock)
        sleep = Mock()
        allocator = QueueNumberAllocator(max_attempts=3, backoff_ms=100, sleep=sleep)

        with patch('queue_management.sequence.next_queue_number', return_value=1):
            with self.assertRaises(ConflictError):
                allocator.allocate(
                    existing.queue_date,
                    patient_name='Bola',
                    patient_phone='+22990000001',
                )

        self.assertEqual([c.args[0] for c in sleep.call_args_list], [0.1, 0.2])
        self.assertEqual(QueueEntry.objects.count(), 1)


class EscalationTest(TestCase):  # EscalationTest class implementation
    def setUp(self):  # Setup
        self.clock = FixedClock(MONDAY_10AM)

    def test_thresholds(self):  # Test thresholds
        self.assertEqual(escalate('low', 29), 'low')
        self.assertEqual(escalate('low', 30), 'normal')
        self.assertEqual(escalate('low', 60), 'high')
        self.assertEqual(escalate('low', 90), 'urgent')

    def test_never_lowers_priority(self):  # Test never lowers priority
        self.assertEqual(escalate('high', 30), 'high')
        self.assertEqual(escalate('urgent', 31), 'urgent')
        self.assertEqual(escalate('high', 65), 'high')

    def test_low_priority_patient_escalates_to_urgent(self):  # Test low priority patient escalates to urgent
        entry = walk_in('Ada', self.clock, priority='low')
        now = self.clock.advance(timedelta(minutes=95))

        self.assertEqual(wait_minutes(entry, now), 95)
        self.assertEqual(effective_priority(entry, now), 'urgent')
        self.assertTrue(is_escalated(entry, now))
        entry.refresh_from_db()
        self.assertEqual(entry.priority, 'low')

    def test_terminal_entries_keep_original_priority(self):  # Test terminal entries keep original priority
        entry = walk_in('Ada', self.clock, priority='low')
        QueueManagementService.transition_status(entry.id, 'cancelled', clock=self.clock)
        entry.refresh_from_db()
        now = self.clock.advance(timedelta(hours=3))
        self.assertEqual(effective_priority(entry, now), 'low')
        self.assertFalse(is_escalated(entry, now))

    def test_order_by_effective_priority_then_arrival(self):  # Test order by effective priority then arrival
        old_low = walk_in('Ada', self.clock, priority='low')
        self.clock.advance(timedelta(minutes=50))
        fresh_high = walk_in('Bola', self.clock, priority='high')
        fresh_normal = walk_in('Chidi', self.clock, priority='normal')
        now = self.clock.advance(timedelta(minutes=45))

        ordered = order_entries([fresh_normal, old_low, fresh_high], now)
        self.assertEqual([e.patient_name for e in ordered], ['Ada', 'Bola', 'Chidi'])


class QueueServiceTest(TestCase):  # QueueServiceTest class implementation
    def setUp(self):  # Setup
        self.clock = FixedClock(MONDAY_10AM)
        self.doctor = make_doctor('house@clinic.test')
        self.other_doctor = make_doctor('grey@clinic.test')

    def test_create_with_inactive_doctor(self):  # Test create with inactive doctor
        self.doctor.is_active = False
        self.doctor.save()
        with self.assertRaises(DoctorUnavailableError):
            walk_in('Ada', self.clock, doctor_id=self.doctor.id)

    def test_create_with_invalid_priority(self):  # Test create with invalid priority
        with self.assertRaises(ValidationError):
            walk_in('Ada', self.clock, priority='critical')

    def test_status_transitions_stamp_timestamps(self):  # Test status transitions stamp timestamps
        entry = walk_in('Ada', self.clock, doctor_id=self.doctor.id)

        called = QueueManagementService.transition_status(entry.id, 'called', clock=self.clock)
        self.assertEqual(called.called_at, self.clock.now())

        self.clock.advance(timedelta(minutes=2))
        started = QueueManagementService.transition_status(entry.id, 'in_consultation', clock=self.clock)
        self.assertEqual(started.consultation_started_at, self.clock.now())

        self.clock.advance(timedelta(minutes=15))
        done = QueueManagementService.transition_status(entry.id, 'completed', clock=self.clock)
        self.assertEqual(done.consultation_ended_at, self.clock.now())
        self.assertEqual(done.consultation_duration, 15)

    def test_invalid_transitions(self):  # Test invalid transitions
        entry = walk_in('Ada', self.clock)
        with self.assertRaises(InvalidTransitionError):
            QueueManagementService.transition_status(entry.id, 'completed', clock=self.clock)

        QueueManagementService.transition_status(entry.id, 'no_show', clock=self.clock)
        with self.assertRaises(InvalidTransitionError):
            QueueManagementService.transition_status(entry.id, 'waiting', clock=self.clock)

    def test_call_next_prefers_urgent(self):  # Test call next prefers urgent
        walk_in('Ada', self.clock, doctor_id=self.doctor.id)
        self.clock.advance(timedelta(minutes=5))
        walk_in('Bola', self.clock, doctor_id=self.doctor.id, priority='urgent')

        called = QueueManagementService.call_next(clock=self.clock)
        self.assertEqual(called.patient_name, 'Bola')
        self.assertEqual(called.status, 'called')
        self.assertEqual(called.called_at, self.clock.now())

    def test_call_next_prefers_escalated_patient(self):  # Test call next prefers escalated patient
        walk_in('Ada', self.clock, doctor_id=self.doctor.id, priority='low')
        self.clock.advance(timedelta(minutes=90))
        walk_in('Bola', self.clock, doctor_id=self.doctor.id, priority='high')

        called = QueueManagementService.call_next(clock=self.clock)
        self.assertEqual(called.patient_name, 'Ada')

    def test_simultaneous_walk_ins(self):  # Test simultaneous walk ins
        entries = [
            walk_in(name, self.clock, doctor_id=self.doctor.id, priority=priority)
            for name, priority in [('Ada', 'normal'), ('Bola', 'low'), ('Chidi', 'urgent')]
        ]
        self.assertEqual([e.queue_number for e in entries], [1, 2, 3])

        called = QueueManagementService.call_next(clock=self.clock)
        self.assertEqual(called.id, entries[2].id)

    def test_call_next_empty_queue(self):  # Test call next empty queue
        self.assertIsNone(QueueManagementService.call_next(clock=self.clock))

    def test_call_next_without_assigned_doctors(self):  # Test call next without assigned doctors
        walk_in('Ada', self.clock)
        with self.assertRaises(UnassignedQueueError):
            QueueManagementService.call_next(clock=self.clock)

    def test_call_next_for_doctor_assigns_unassigned_patient(self):  # Test call next for doctor assigns unassigned patient
        walk_in('Ada', self.clock, doctor_id=self.other_doctor.id, priority='urgent')
        self.clock.advance(timedelta(minutes=1))
        unassigned = walk_in('Bola', self.clock)

        called = QueueManagementService.call_next(doctor_id=self.doctor.id, clock=self.clock)
        self.assertEqual(called.id, unassigned.id)
        self.assertEqual(called.doctor_id, self.doctor.id)

    def test_call_next_for_unknown_doctor(self):  # Test call next for unknown doctor
        with self.assertRaises(NotFoundError):
            QueueManagementService.call_next(
                doctor_id='00000000-0000-0000-0000-000000000000', clock=self.clock
            )

    def test_auto_assign_picks_least_loaded_doctor(self):  # Test auto assign picks least loaded doctor
        walk_in('Ada', self.clock, doctor_id=self.doctor.id)
        entry = walk_in('Bola', self.clock)

        assigned = QueueManagementService.auto_assign_doctor(entry.id, clock=self.clock)
        self.assertEqual(assigned.doctor_id, self.other_doctor.id)

    def test_auto_assign_without_available_doctor(self):  # Test auto assign without available doctor
        entry = walk_in('Ada', self.clock)
        evening = FixedClock(MONDAY_10AM.replace(hour=21))

        with self.assertRaises(ValidationError) as ctx:
            QueueManagementService.auto_assign_doctor(entry.id, clock=evening)
        self.assertEqual(ctx.exception.code, 'no_doctor_available')

    def test_update_terminal_entry_rejected(self):  # Test update terminal entry rejected
        entry = walk_in('Ada', self.clock)
        QueueManagementService.transition_status(entry.id, 'cancelled', clock=self.clock)
        with self.assertRaises(ValidationError):
            QueueManagementService.update_entry(entry.id, {'notes': 'late'})

    def test_queue_position(self):  # Test queue position
        walk_in('Ada', self.clock, doctor_id=self.doctor.id)
        second = walk_in('Bola', self.clock, doctor_id=self.doctor.id)

        position = QueueManagementService.get_queue_position(second.id, clock=self.clock)
        self.assertEqual(position['people_ahead'], 1)
        self.assertEqual(position['total_waiting'], 2)
        self.assertEqual(position['estimated_wait_time'], 30)

    def test_find_by_queue_number(self):  # Test find by queue number
        entry = walk_in('Ada', self.clock)
        found = QueueManagementService.find_by_queue_number(1, clock=self.clock)
        self.assertEqual(found.id, entry.id)
        with self.assertRaises(NotFoundError):
            QueueManagementService.find_by_queue_number(7, clock=self.clock)

    def test_update_can_unassign_doctor(self):  # Test update can unassign doctor
        entry = walk_in('Ada', self.clock, doctor_id=self.doctor.id)
        updated = QueueManagementService.update_entry(entry.id, {'doctor_id': None})
        self.assertIsNone(updated.doctor_id)
        entry.refresh_from_db()
        self.assertIsNone(entry.doctor_id)

    def test_list_entries_rejects_malformed_filters(self):  # Test list entries rejects malformed filters
        with self.assertRaises(ValidationError):
            QueueManagementService.list_entries(doctor_id='not-a-uuid', clock=self.clock)
        with self.assertRaises(ValidationError):
            QueueManagementService.list_entries(status='sleeping', clock=self.clock)
        with self.assertRaises(ValidationError):
            QueueManagementService.list_entries(priority='whenever', clock=self.clock)

    def test_list_entries_by_doctor(self):  # Test list entries by doctor
        walk_in('Ada', self.clock, doctor_id=self.doctor.id)
        walk_in('Bola', self.clock, doctor_id=self.other_doctor.id)
        entries = QueueManagementService.list_entries(doctor_id=self.doctor.id, clock=self.clock)
        self.assertEqual([entry.patient_name for entry in entries], ['Ada'])


class QueueAPITest(APITestCase):  # QueueAPITest class implementation
    def setUp(self):  # Setup
        self.client = APIClient()
        self.user = get_user_model().objects.create_user(
            username='frontdesk', password='test123'
        )
        self.doctor = make_doctor('house@clinic.test')

    def test_requires_authentication(self):  # Test requires authentication
        response = self.client.get(reverse('queue_management:queue_list'))
        self.assertIn(response.status_code, [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN])

    def test_register_walk_in(self):  # Test register walk in
        self.client.force_authenticate(user=self.user)
        response = self.client.post(
            reverse('queue_management:queue_list'),
            {'patient_name': 'Ada', 'patient_phone': '+22990000000', 'priority': 'high'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['queue_number'], 1)
        self.assertEqual(response.data['status'], 'waiting')
        self.assertEqual(response.data['effective_priority'], 'high')
        self.assertFalse(response.data['is_escalated'])

    def test_register_walk_in_missing_fields(self):  # Test register walk in missing fields
        self.client.force_authenticate(user=self.user)
        response = self.client.post(reverse('queue_management:queue_list'), {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_call_next_empty(self):  # Test call next empty
        self.client.force_authenticate(user=self.user)
        response = self.client.post(reverse('queue_management:call_next_patient'), {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'queue_empty')

    def test_call_next_unassigned(self):  # Test call next unassigned
        self.client.force_authenticate(user=self.user)
        QueueManagementService.create_entry({'patient_name': 'Ada', 'patient_phone': '1'})
        response = self.client.post(reverse('queue_management:call_next_patient'), {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'no_doctors_assigned')

    def test_invalid_transition_response(self):  # Test invalid transition response
        self.client.force_authenticate(user=self.user)
        entry = QueueManagementService.create_entry({'patient_name': 'Ada', 'patient_phone': '1'})
        response = self.client.patch(
            reverse('queue_management:update_queue_status', args=[entry.id]),
            {'status': 'completed'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_transition')

    def test_unknown_entry(self):  # Test unknown entry
        self.client.force_authenticate(user=self.user)
        response = self.client.get(
            reverse('queue_management:queue_detail', args=['00000000-0000-0000-0000-000000000000'])
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'not_found')

    def test_list_active_only(self):  # Test list active only
        self.client.force_authenticate(user=self.user)
        first = QueueManagementService.create_entry({'patient_name': 'Ada', 'patient_phone': '1'})
        QueueManagementService.create_entry({'patient_name': 'Bola', 'patient_phone': '2'})
        QueueManagementService.transition_status(first.id, 'cancelled')

        response = self.client.get(reverse('queue_management:queue_list'), {'active_only': 'true'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['patient_name'] for row in response.data], ['Bola'])

    def test_list_with_malformed_doctor_id(self):  # Test list with malformed doctor id
        self.client.force_authenticate(user=self.user)
        response = self.client.get(reverse('queue_management:queue_list'), {'doctor_id': 'not-a-uuid'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'validation_error')

    def test_list_with_unknown_status(self):  # Test list with unknown status
        self.client.force_authenticate(user=self.user)
        response = self.client.get(reverse('queue_management:queue_list'), {'status': 'sleeping'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_lookup_by_number_with_malformed_date(self):  # Test lookup by number with malformed date
        self.client.force_authenticate(user=self.user)
        response = self.client.get(
            reverse('queue_management:queue_by_number', args=[1]), {'date': 'garbage'}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'validation_error')

    def test_unassign_doctor(self):  # Test unassign doctor
        self.client.force_authenticate(user=self.user)
        entry = QueueManagementService.create_entry(
            {'patient_name': 'Ada', 'patient_phone': '1', 'doctor_id': self.doctor.id}
        )
        response = self.client.patch(
            reverse('queue_management:queue_detail', args=[entry.id]),
            {'doctor_id': None},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        entry.refresh_from_db()
        self.assertIsNone(entry.doctor_id)
