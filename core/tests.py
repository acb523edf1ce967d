from datetime import datetime, timedelta, timezone as dt_timezone

from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.test import APIRequestFactory, APITestCase

from .clock import FixedClock
from .decorators import handle_scheduling_errors
from .exceptions import ConflictError, DoctorUnavailableError, NotFoundError, ValidationError
from .logging_config import APP_LOGGERS, get_logging_config


@api_view(['GET'])
@permission_classes([AllowAny])
@handle_scheduling_errors
def failing_view(request):
    kind = request.query_params.get('kind')
    if kind == 'conflict':
        raise ConflictError('Slot taken')
    if kind == 'unavailable':
        raise DoctorUnavailableError('Doctor is not active')
    return Response({'ok': True})


class ClockTest(TestCase):  # ClockTest class implementation
    def test_fixed_clock_advances(self):  # Test fixed clock advances
        clock = FixedClock(datetime(2024, 3, 4, 23, 50, tzinfo=dt_timezone.utc))
        self.assertEqual(str(clock.today()), '2024-03-04')
        clock.advance(timedelta(minutes=20))
        self.assertEqual(str(clock.today()), '2024-03-05')

    @override_settings(TIME_ZONE='Africa/Lagos')
    def test_today_uses_clinic_time_zone(self):  # Test today uses clinic time zone
        clock = FixedClock(datetime(2024, 3, 4, 23, 30, tzinfo=dt_timezone.utc))
        self.assertEqual(str(clock.today()), '2024-03-05')
        self.assertEqual(clock.local_now().hour, 0)

    def test_naive_instant_made_aware(self):  # Test naive instant made aware
        clock = FixedClock(datetime(2024, 3, 4, 10, 0))
        self.assertIsNotNone(clock.now().tzinfo)


class ErrorMappingTest(TestCase):  # ErrorMappingTest class implementation
    def setUp(self):  # Setup
        self.factory = APIRequestFactory()

    def test_error_payload(self):  # Test error payload
        self.assertEqual(NotFoundError('gone').to_dict(), {'error': 'gone', 'code': 'not_found'})
        self.assertEqual(ValidationError('bad', code='no_doctor_available').code, 'no_doctor_available')
        self.assertEqual(ValidationError('bad').code, 'validation_error')

    def test_decorator_maps_status_codes(self):  # Test decorator maps status codes
        response = failing_view(self.factory.get('/fake/', {'kind': 'conflict'}))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data, {'error': 'Slot taken', 'code': 'conflict'})

        response = failing_view(self.factory.get('/fake/', {'kind': 'unavailable'}))
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)

        response = failing_view(self.factory.get('/fake/'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class LoggingConfigTest(TestCase):  # LoggingConfigTest class implementation
    def test_json_format(self):  # Test json format
        config = get_logging_config('DEBUG', 'json')
        self.assertEqual(config['handlers']['console']['formatter'], 'json')
        self.assertEqual(config['formatters']['json']['()'], 'pythonjsonlogger.json.JsonFormatter')
        for name in APP_LOGGERS:
            self.assertEqual(config['loggers'][name]['level'], 'DEBUG')

    def test_default_format(self):  # Test default format
        self.assertEqual(get_logging_config()['handlers']['console']['formatter'], 'verbose')


class BackendEndpointsTest(APITestCase):  # BackendEndpointsTest class implementation
    def test_health_check(self):  # Test health check
        response = self.client.get(reverse('health_check'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['database'], 'connected')

    def test_api_root(self):  # Test api root
        response = self.client.get(reverse('api_root'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('queue', response.data)
