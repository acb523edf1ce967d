"""
Queue Management API Views
Handles walk-in registration, queue listing, patient calling and doctor assignment

This is the SINGLE source for queue management views.
"""
from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.clock import default_clock
from core.decorators import handle_scheduling_errors
from core.exceptions import ValidationError
from .serializers import (
    AssignDoctorSerializer,
    CallNextSerializer,
    QueueEntryCreateSerializer,
    QueueEntrySerializer,
    QueueEntryUpdateSerializer,
    QueueStatusUpdateSerializer,
)
from .services import QueueManagementService


def _is_true(value):
    return str(value).lower() in ('1', 'true', 'yes')


def _serialize(entry, now=None):
    return QueueEntrySerializer(entry, context={'now': now or default_clock.now()}).data


@extend_schema(tags=['Queue'], request=QueueEntryCreateSerializer, responses={201: QueueEntrySerializer})
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def queue_list(request):
    """List queue entries (filterable) or register a walk-in patient"""
    if request.method == 'POST':
        serializer = QueueEntryCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        entry = QueueManagementService.create_entry(serializer.validated_data)
        return Response(_serialize(entry), status=status.HTTP_201_CREATED)

    now = default_clock.now()
    entries = QueueManagementService.list_entries(
        status=request.query_params.get('status'),
        doctor_id=request.query_params.get('doctor_id'),
        priority=request.query_params.get('priority'),
        active_only=_is_true(request.query_params.get('active_only', 'false')),
    )
    return Response(QueueEntrySerializer(entries, many=True, context={'now': now}).data)


@extend_schema(tags=['Queue'], responses={200: QueueEntrySerializer(many=True)})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def active_queue(request):
    """Entries still waiting, called or in consultation"""
    now = default_clock.now()
    entries = QueueManagementService.get_active_queue()
    return Response(QueueEntrySerializer(entries, many=True, context={'now': now}).data)


@extend_schema(tags=['Queue'], responses={200: QueueEntrySerializer(many=True)})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def waiting_queue(request):
    now = default_clock.now()
    entries = QueueManagementService.get_waiting_queue()
    return Response(QueueEntrySerializer(entries, many=True, context={'now': now}).data)


@extend_schema(tags=['Queue'], request=QueueEntryUpdateSerializer, responses={200: QueueEntrySerializer})
@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def queue_detail(request, entry_id):
    """Retrieve, edit or delete a single queue entry"""
    if request.method == 'GET':
        return Response(_serialize(QueueManagementService.get_entry(entry_id)))

    if request.method == 'DELETE':
        QueueManagementService.remove_entry(entry_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = QueueEntryUpdateSerializer(data=request.data, partial=True)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    entry = QueueManagementService.update_entry(entry_id, serializer.validated_data)
    return Response(_serialize(entry))


@extend_schema(tags=['Queue'], responses={200: QueueEntrySerializer})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def queue_by_number(request, queue_number):
    """Look up today's entry (or ?date=YYYY-MM-DD) by its queue number"""
    value = request.query_params.get('date')
    queue_date = None
    if value:
        try:
            queue_date = parse_date(value)
        except ValueError:
            queue_date = None
        if queue_date is None:
            raise ValidationError(f"Invalid date: {value}")

    entry = QueueManagementService.find_by_queue_number(queue_number, queue_date=queue_date)
    return Response(_serialize(entry))


@extend_schema(tags=['Queue'], request=QueueStatusUpdateSerializer, responses={200: QueueEntrySerializer})
@api_view(['PATCH', 'POST'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def update_queue_status(request, entry_id):
    serializer = QueueStatusUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    entry = QueueManagementService.transition_status(entry_id, serializer.validated_data['status'])
    return Response(_serialize(entry))


@extend_schema(
    tags=['Queue'],
    request=CallNextSerializer,
    responses={200: QueueEntrySerializer, 404: OpenApiResponse(description="No patients waiting")},
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def call_next_patient(request):
    """Call the highest-priority waiting patient, optionally for one doctor"""
    serializer = CallNextSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    entry = QueueManagementService.call_next(doctor_id=serializer.validated_data.get('doctor_id'))
    if entry is None:
        return Response(
            {'error': 'No patients waiting in queue', 'code': 'queue_empty'},
            status=status.HTTP_404_NOT_FOUND
        )

    return Response(_serialize(entry))


@extend_schema(tags=['Queue'], request=AssignDoctorSerializer, responses={200: QueueEntrySerializer})
@api_view(['POST'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def assign_doctor(request, entry_id):
    serializer = AssignDoctorSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    entry = QueueManagementService.assign_doctor(entry_id, serializer.validated_data['doctor_id'])
    return Response(_serialize(entry))


@extend_schema(tags=['Queue'], request=None, responses={200: QueueEntrySerializer})
@api_view(['POST'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def auto_assign_doctor(request, entry_id):
    """Assign the least-loaded schedule-available doctor"""
    entry = QueueManagementService.auto_assign_doctor(entry_id)
    return Response(_serialize(entry))


@extend_schema(tags=['Queue'], responses={200: OpenApiResponse(description="Queue position")})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def queue_position(request, entry_id):
    return Response(QueueManagementService.get_queue_position(entry_id))
