from datetime import date, datetime, timedelta, timezone as dt_timezone

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from appointments.services import AppointmentService
from core.clock import FixedClock
from doctor.models import Doctor
from queue_management.services import QueueManagementService
from .services import StatisticsService, average_wait_minutes, urgency_counts

MONDAY_10AM = datetime(2024, 3, 4, 10, 0, tzinfo=dt_timezone.utc)


class QueueStatisticsTest(TestCase):  # QueueStatisticsTest class implementation
    def setUp(self):  # Setup
        self.clock = FixedClock(MONDAY_10AM)
        self.doctor = Doctor.objects.create(
            name='House',
            specialization='Diagnostics',
            email='house@clinic.test',
            availability=['09:00', '09:30', '16:00'],
            working_days=['Monday'],
        )

    def walk_in(self, name, priority):
        return QueueManagementService.create_entry(
            {
                'patient_name': name,
                'patient_phone': '+22990000000',
                'priority': priority,
                'doctor_id': self.doctor.id,
            },
            clock=self.clock,
        )

    def move(self, entry, *statuses):
        for new_status in statuses:
            QueueManagementService.transition_status(entry.id, new_status, clock=self.clock)

    def test_day_statistics(self):  # Test day statistics
        low = self.walk_in('Ada', 'low')
        self.walk_in('Bola', 'urgent')
        first = self.walk_in('Chidi', 'normal')
        second = self.walk_in('Dayo', 'normal')

        self.clock.advance(timedelta(minutes=20))
        self.move(first, 'called', 'in_consultation')
        self.clock.advance(timedelta(minutes=20))
        self.move(second, 'called', 'in_consultation', 'completed')

        appointment = AppointmentService.create_appointment({
            'patient_name': 'Efe',
            'patient_phone': '+22990000001',
            'doctor_id': self.doctor.id,
            'date': date(2024, 3, 4),
            'time': '09:00',
        })
        AppointmentService.update_status(appointment.id, 'completed')

        self.clock.instant = MONDAY_10AM + timedelta(minutes=95)
        stats = StatisticsService.get_queue_stats(clock=self.clock)

        self.assertEqual(stats['total_patients'], 4)
        self.assertEqual(stats['waiting'], 2)
        self.assertEqual(stats['in_consultation'], 1)
        self.assertEqual(stats['completed'], 1)
        self.assertEqual(stats['completed_today'], 2)
        self.assertEqual(stats['average_wait_time'], 30)
        self.assertEqual(stats['urgent_patients'], 2)
        self.assertEqual(stats['escalated_patients'], 1)
        self.assertEqual(stats['today_appointments'], 1)
        self.assertEqual(stats['available_doctors'], 1)

        low.refresh_from_db()
        self.assertEqual(low.priority, 'low')

    def test_other_days_excluded(self):  # Test other days excluded
        self.walk_in('Ada', 'normal')
        self.clock.advance(timedelta(days=1))
        stats = StatisticsService.get_queue_stats(clock=self.clock)
        self.assertEqual(stats['total_patients'], 0)
        self.assertEqual(stats['average_wait_time'], 0)

    def test_escalated_low_patient_in_both_buckets(self):  # Test escalated low patient in both buckets
        entry = self.walk_in('Ada', 'low')
        now = self.clock.advance(timedelta(minutes=95))
        self.assertEqual(urgency_counts([entry], now), (1, 1))

    def test_average_wait_rounds(self):  # Test average wait rounds
        self.assertEqual(average_wait_minutes([]), 0)
        entry = self.walk_in('Ada', 'normal')
        entry.consultation_started_at = entry.created_at + timedelta(minutes=10, seconds=40)
        self.assertEqual(average_wait_minutes([entry]), 11)

    def test_appointment_statistics(self):  # Test appointment statistics
        AppointmentService.create_appointment({
            'patient_name': 'Efe',
            'patient_phone': '+22990000001',
            'doctor_id': self.doctor.id,
            'date': date(2024, 3, 4),
            'time': '09:30',
        })
        stats = StatisticsService.get_appointment_stats(clock=self.clock)
        self.assertEqual(stats['total'], 1)
        self.assertEqual(stats['scheduled'], 1)
        self.assertEqual(stats['completed'], 0)


class AnalyticsAPITest(APITestCase):  # AnalyticsAPITest class implementation
    def setUp(self):  # Setup
        self.client = APIClient()
        self.user = get_user_model().objects.create_user(username='manager', password='test123')
        self.client.force_authenticate(user=self.user)

    def test_queue_stats(self):  # Test queue stats
        response = self.client.get(reverse('analytics:queue-stats'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_patients'], 0)

    def test_invalid_date(self):  # Test invalid date
        response = self.client.get(reverse('analytics:overview'), {'date': 'yesterday'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'validation_error')

    def test_overview_for_given_day(self):  # Test overview for given day
        response = self.client.get(reverse('analytics:overview'), {'date': '2024-03-04'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['queue']['date'], '2024-03-04')
        self.assertIn('doctors', response.data)
