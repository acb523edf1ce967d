from datetime import date, datetime, timezone as dt_timezone
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from core.clock import FixedClock
from core.exceptions import ConflictError, NotFoundError, ValidationError
from doctor.models import Doctor
from .conflicts import AppointmentConflictDetector
from .models import Appointment
from .services import AppointmentService

BOOKING_DATE = date(2024, 1, 10)


def booking(doctor, time='09:00', day=BOOKING_DATE, **extra):
    data = {
        'patient_name': 'Ada Obi',
        'patient_phone': '+22990000000',
        'doctor_id': doctor.id,
        'date': day,
        'time': time,
    }
    data.update(extra)
    return data


class AppointmentConflictTest(TestCase):  # AppointmentConflictTest class implementation
    def setUp(self):  # Setup
        self.doctor = Doctor.objects.create(
            name='House',
            specialization='Diagnostics',
            email='house@clinic.test',
            availability=['09:00', '09:30'],
            working_days=['Wednesday'],
        )

    def test_book_then_double_book(self):  # Test book then double book
        first = AppointmentService.create_appointment(booking(self.doctor))
        self.assertEqual(first.status, 'scheduled')

        with self.assertRaises(ConflictError):
            AppointmentService.create_appointment(booking(self.doctor))

    def test_time_outside_availability(self):  # Test time outside availability
        with self.assertRaises(ValidationError):
            AppointmentService.create_appointment(booking(self.doctor, time='10:00'))

    def test_inactive_doctor(self):  # Test inactive doctor
        self.doctor.is_active = False
        self.doctor.save()
        with self.assertRaises(NotFoundError):
            AppointmentService.create_appointment(booking(self.doctor))

    def test_slot_free_again_after_cancel(self):  # Test slot free again after cancel
        first = AppointmentService.create_appointment(booking(self.doctor))
        AppointmentService.cancel_appointment(first.id)
        second = AppointmentService.create_appointment(booking(self.doctor))
        self.assertEqual(second.status, 'scheduled')

    def test_only_scheduled_appointments_block(self):  # Test only scheduled appointments block
        first = AppointmentService.create_appointment(booking(self.doctor))
        AppointmentService.update_status(first.id, 'confirmed')
        AppointmentService.create_appointment(booking(self.doctor))
        self.assertEqual(Appointment.objects.count(), 2)

    def test_detector_excludes_the_appointment_itself(self):  # Test detector excludes the appointment itself
        first = AppointmentService.create_appointment(booking(self.doctor))
        doctor = AppointmentConflictDetector.validate(
            self.doctor.id, BOOKING_DATE, '09:00', exclude_appointment_id=first.id
        )
        self.assertEqual(doctor.id, self.doctor.id)

    def test_constraint_reports_conflict(self):  # Test constraint reports conflict
        AppointmentService.create_appointment(booking(self.doctor))
        with patch.object(AppointmentConflictDetector, 'validate', return_value=self.doctor):
            with self.assertRaises(ConflictError):
                AppointmentService.create_appointment(booking(self.doctor))
        self.assertEqual(Appointment.objects.count(), 1)


class AppointmentLifecycleTest(TestCase):  # AppointmentLifecycleTest class implementation
    def setUp(self):  # Setup
        self.doctor = Doctor.objects.create(
            name='Grey',
            specialization='Surgery',
            email='grey@clinic.test',
            availability=['09:00', '09:30', '10:00'],
            working_days=['Monday', 'Wednesday'],
        )
        self.appointment = AppointmentService.create_appointment(booking(self.doctor))

    def test_reschedule(self):  # Test reschedule
        moved = AppointmentService.reschedule_appointment(self.appointment.id, BOOKING_DATE, '09:30')
        self.assertEqual(moved.time, '09:30')

    def test_reschedule_into_taken_slot(self):  # Test reschedule into taken slot
        AppointmentService.create_appointment(booking(self.doctor, time='10:00', patient_name='Bola'))
        with self.assertRaises(ConflictError):
            AppointmentService.reschedule_appointment(self.appointment.id, BOOKING_DATE, '10:00')

    def test_reschedule_requires_scheduled(self):  # Test reschedule requires scheduled
        AppointmentService.update_status(self.appointment.id, 'confirmed')
        with self.assertRaises(ValidationError):
            AppointmentService.reschedule_appointment(self.appointment.id, BOOKING_DATE, '09:30')

    def test_cancel_completed(self):  # Test cancel completed
        AppointmentService.update_status(self.appointment.id, 'completed')
        with self.assertRaises(ValidationError):
            AppointmentService.cancel_appointment(self.appointment.id, reason='Too late')

    def test_cancel_appends_reason(self):  # Test cancel appends reason
        AppointmentService.update_appointment(self.appointment.id, {'notes': 'Bring lab results'})
        cancelled = AppointmentService.cancel_appointment(self.appointment.id, reason='Travelling')
        self.assertEqual(cancelled.status, 'cancelled')
        self.assertEqual(cancelled.notes, 'Bring lab results\nCancellation reason: Travelling')
        self.assertIsNotNone(cancelled.cancelled_at)

    def test_update_without_slot_change_skips_detector(self):  # Test update without slot change skips detector
        self.doctor.is_active = False
        self.doctor.save()
        updated = AppointmentService.update_appointment(self.appointment.id, {'diagnosis': 'Flu'})
        self.assertEqual(updated.diagnosis, 'Flu')

    def test_update_slot_runs_detector(self):  # Test update slot runs detector
        with self.assertRaises(ValidationError):
            AppointmentService.update_appointment(self.appointment.id, {'time': '11:00'})

    def test_upcoming_and_stats(self):  # Test upcoming and stats
        clock = FixedClock(datetime(2024, 1, 10, 8, 0, tzinfo=dt_timezone.utc))
        AppointmentService.create_appointment(booking(self.doctor, day=date(2024, 1, 15)))
        later = AppointmentService.create_appointment(booking(self.doctor, day=date(2024, 1, 29)))
        AppointmentService.update_status(later.id, 'no_show')

        upcoming = AppointmentService.list_upcoming_appointments(days=7, clock=clock)
        self.assertEqual([a.date for a in upcoming], [date(2024, 1, 10), date(2024, 1, 15)])

        stats = AppointmentService.get_stats(clock=clock)
        self.assertEqual(stats['total'], 3)
        self.assertEqual(stats['scheduled'], 2)
        self.assertEqual(stats['no_show'], 1)
        self.assertEqual(stats['today'], 1)
        self.assertEqual(stats['this_week'], 1)

    def test_unknown_appointment(self):  # Test unknown appointment
        with self.assertRaises(NotFoundError):
            AppointmentService.get_appointment('not-a-uuid')


class AppointmentAPITest(APITestCase):  # AppointmentAPITest class implementation
    def setUp(self):  # Setup
        self.client = APIClient()
        self.user = get_user_model().objects.create_user(username='frontdesk', password='test123')
        self.client.force_authenticate(user=self.user)
        self.doctor = Doctor.objects.create(
            name='House',
            specialization='Diagnostics',
            email='house@clinic.test',
            availability=['09:00', '09:30'],
            working_days=['Wednesday'],
        )
        self.payload = {
            'patient_name': 'Ada Obi',
            'patient_phone': '+22990000000',
            'doctor_id': str(self.doctor.id),
            'date': '2024-01-10',
            'time': '09:00',
        }

    def test_booking_status_codes(self):  # Test booking status codes
        url = reverse('appointments:appointment_list')

        response = self.client.post(url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'scheduled')

        response = self.client.post(url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'conflict')

        response = self.client.post(url, dict(self.payload, time='10:00'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'validation_error')

    def test_malformed_time(self):  # Test malformed time
        response = self.client.post(
            reverse('appointments:appointment_list'), dict(self.payload, time='9am'), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('time', response.data)

    def test_cancel_via_api(self):  # Test cancel via api
        appointment = AppointmentService.create_appointment(booking(self.doctor))
        response = self.client.post(
            reverse('appointments:cancel_appointment', args=[appointment.id]),
            {'reason': 'Feeling better'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['notes'], 'Cancellation reason: Feeling better')

    def test_filter_by_patient_name(self):  # Test filter by patient name
        AppointmentService.create_appointment(booking(self.doctor))
        AppointmentService.create_appointment(booking(self.doctor, time='09:30', patient_name='Bola Ade'))

        response = self.client.get(reverse('appointments:appointment_list'), {'patient_name': 'bola'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['patient_name'] for row in response.data], ['Bola Ade'])
