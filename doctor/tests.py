from datetime import datetime, timezone as dt_timezone

from django.conf import settings
from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from backend.celery import app
from core.clock import FixedClock
from core.exceptions import DoctorUnavailableError, NotFoundError, ValidationError
from .assignment import rank_doctors, select_optimal_doctor
from .models import Doctor
from .schedule import effective_status, is_schedule_available, working_window
from .services import DoctorDirectoryService
from .tasks import sync_doctor_schedule_statuses

# 2024-03-04 is a Monday
MONDAY = datetime(2024, 3, 4, tzinfo=dt_timezone.utc)


def at(hour, minute=0, day=MONDAY):
    return day.replace(hour=hour, minute=minute)


def make_doctor(email, **overrides):
    fields = {
        'name': email.split('@')[0].title(),
        'specialization': 'General Medicine',
        'email': email,
        'availability': ['09:00', '09:30', '16:00'],
        'working_days': ['Monday', 'Wednesday'],
        'consultation_duration': 30,
    }
    fields.update(overrides)
    return Doctor.objects.create(**fields)


class ScheduleTest(TestCase):  # ScheduleTest class implementation
    def setUp(self):  # Setup
        self.doctor = make_doctor('house@clinic.test')

    def test_window_includes_last_slot_duration(self):  # Test window includes last slot duration
        self.assertEqual(working_window(self.doctor), (9 * 60, 16 * 60 + 30))

    def test_window_bounds_are_inclusive(self):  # Test window bounds are inclusive
        self.assertTrue(is_schedule_available(self.doctor, at(9, 0)))
        self.assertTrue(is_schedule_available(self.doctor, at(16, 30)))
        self.assertFalse(is_schedule_available(self.doctor, at(8, 59)))
        self.assertFalse(is_schedule_available(self.doctor, at(16, 31)))

    def test_non_working_day(self):  # Test non working day
        tuesday = MONDAY.replace(day=5)
        self.assertFalse(is_schedule_available(self.doctor, at(10, day=tuesday)))

    def test_weekday_names_case_insensitive(self):  # Test weekday names case insensitive
        self.doctor.working_days = ['MONDAY']
        self.assertTrue(is_schedule_available(self.doctor, at(10)))

    def test_no_slots_never_available(self):  # Test no slots never available
        self.doctor.availability = []
        self.assertIsNone(working_window(self.doctor))
        self.assertFalse(is_schedule_available(self.doctor, at(10)))

    def test_default_consultation_duration(self):  # Test default consultation duration
        self.doctor.consultation_duration = 0
        self.assertEqual(working_window(self.doctor), (9 * 60, 16 * 60 + 30))

    def test_effective_status(self):  # Test effective status
        self.doctor.status = 'busy'
        self.assertEqual(effective_status(self.doctor, at(10)), 'busy')
        self.assertEqual(effective_status(self.doctor, at(20)), 'offline')


class AssignmentOptimizerTest(TestCase):  # AssignmentOptimizerTest class implementation
    def setUp(self):  # Setup
        self.available = make_doctor('available@clinic.test')
        self.busy = make_doctor('busy@clinic.test', status='busy')
        self.offline = make_doctor('offline@clinic.test', status='offline')
        self.off_schedule = make_doctor('weekend@clinic.test', working_days=['Saturday'])
        self.inactive = make_doctor('retired@clinic.test', is_active=False)
        self.doctors = [self.busy, self.offline, self.off_schedule, self.inactive, self.available]

    def test_filters_unqualified_doctors(self):  # Test filters unqualified doctors
        ranked = rank_doctors(self.doctors, {}, at(10))
        self.assertEqual(ranked, [self.available, self.busy])

    def test_available_preferred_over_busy(self):  # Test available preferred over busy
        workloads = {self.available.pk: 3}
        self.assertEqual(select_optimal_doctor(self.doctors, workloads, at(10)), self.available)

    def test_idle_doctor_preferred(self):  # Test idle doctor preferred
        second = make_doctor('second@clinic.test')
        workloads = {self.available.pk: 2}
        self.assertEqual(select_optimal_doctor([self.available, second], workloads, at(10)), second)

    def test_fewer_entries_wins(self):  # Test fewer entries wins
        second = make_doctor('second@clinic.test')
        workloads = {self.available.pk: 4, second.pk: 1}
        self.assertEqual(select_optimal_doctor([self.available, second], workloads, at(10)), second)

    def test_nobody_qualifies(self):  # Test nobody qualifies
        self.assertIsNone(select_optimal_doctor(self.doctors, {}, at(22)))


class DoctorDirectoryServiceTest(TestCase):  # DoctorDirectoryServiceTest class implementation
    def setUp(self):  # Setup
        self.house = make_doctor('house@clinic.test', specialization='Diagnostics')
        self.grey = make_doctor('grey@clinic.test', specialization='Surgery', status='busy')
        self.night = make_doctor('night@clinic.test', specialization='Surgery', availability=['20:00'])
        self.retired = make_doctor('retired@clinic.test', is_active=False, status='offline')

    def test_find_active_doctor(self):  # Test find active doctor
        self.assertEqual(DoctorDirectoryService.find_active_doctor(self.house.id), self.house)
        with self.assertRaises(NotFoundError):
            DoctorDirectoryService.find_active_doctor(self.retired.id)

    def test_require_active_doctor(self):  # Test require active doctor
        with self.assertRaises(DoctorUnavailableError):
            DoctorDirectoryService.require_active_doctor(self.retired.id)
        with self.assertRaises(NotFoundError):
            DoctorDirectoryService.require_active_doctor('00000000-0000-0000-0000-000000000000')

    def test_sync_takes_off_schedule_doctors_offline(self):  # Test sync takes off schedule doctors offline
        changed = DoctorDirectoryService.sync_schedule_statuses(clock=FixedClock(at(10)))
        self.assertEqual(changed, [self.night])

        self.night.refresh_from_db()
        self.house.refresh_from_db()
        self.assertEqual(self.night.status, 'offline')
        self.assertEqual(self.house.status, 'available')

    def test_sync_leaves_offline_doctors_alone(self):  # Test sync leaves offline doctors alone
        DoctorDirectoryService.update_status(self.house.id, 'offline')
        changed = DoctorDirectoryService.sync_schedule_statuses(clock=FixedClock(at(23)))
        self.assertCountEqual(changed, [self.grey, self.night])

    def test_update_status_rejects_unknown_value(self):  # Test update status rejects unknown value
        with self.assertRaises(ValidationError):
            DoctorDirectoryService.update_status(self.house.id, 'vacation')

    def test_stats(self):  # Test stats
        stats = DoctorDirectoryService.get_stats()
        self.assertEqual(stats['total_doctors'], 4)
        self.assertEqual(stats['active_doctors'], 3)
        self.assertEqual(stats['available_doctors'], 2)
        self.assertEqual(stats['busy_doctors'], 1)
        self.assertEqual(stats['offline_doctors'], 1)
        self.assertEqual(
            stats['specializations'],
            [{'name': 'Diagnostics', 'count': 1}, {'name': 'Surgery', 'count': 2}],
        )

    def test_sync_task(self):  # Test sync task
        self.assertTrue(sync_doctor_schedule_statuses().startswith('Set '))

    def test_sync_task_scheduled_from_settings(self):  # Test sync task scheduled from settings
        entry = app.conf.beat_schedule['sync-doctor-schedule-statuses']
        self.assertEqual(entry['task'], 'doctor.tasks.sync_doctor_schedule_statuses')
        self.assertEqual(entry['schedule'], settings.DOCTOR_STATUS_SYNC_MINUTES * 60.0)


class DoctorAPITest(APITestCase):  # DoctorAPITest class implementation
    def setUp(self):  # Setup
        self.client = APIClient()
        self.user = get_user_model().objects.create_user(username='frontdesk', password='test123')
        self.client.force_authenticate(user=self.user)
        self.doctor = make_doctor('house@clinic.test')

    def test_list_active_doctors(self):  # Test list active doctors
        make_doctor('retired@clinic.test', is_active=False)
        response = self.client.get(reverse('doctor:doctor_list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['email'] for row in response.data], ['house@clinic.test'])
        self.assertIn('effective_status', response.data[0])

    def test_update_status(self):  # Test update status
        response = self.client.patch(
            reverse('doctor:update_doctor_status', args=[self.doctor.id]),
            {'status': 'busy'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'busy')

    def test_unknown_doctor(self):  # Test unknown doctor
        response = self.client.get(
            reverse('doctor:doctor_detail', args=['00000000-0000-0000-0000-000000000000'])
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'not_found')

    def test_stats(self):  # Test stats
        response = self.client.get(reverse('doctor:doctor_stats'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_doctors'], 1)
