"""
Doctor Directory API Views
Active doctor listing, status updates, schedule sync and directory statistics
"""
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.clock import default_clock
from core.decorators import handle_scheduling_errors
from queue_management.services import QueueManagementService
from .serializers import DoctorSerializer, DoctorStatusSerializer
from .services import DoctorDirectoryService


def _context():
    return {'local_now': default_clock.local_now()}


@extend_schema(tags=['Doctors'], responses={200: DoctorSerializer(many=True)})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def doctor_list(request):
    """Active doctors with their schedule-derived status"""
    doctors = DoctorDirectoryService.list_active_doctors()
    return Response(DoctorSerializer(doctors, many=True, context=_context()).data)


@extend_schema(tags=['Doctors'], responses={200: DoctorSerializer})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def doctor_detail(request, doctor_id):
    doctor = DoctorDirectoryService.get_doctor(doctor_id)
    return Response(DoctorSerializer(doctor, context=_context()).data)


@extend_schema(tags=['Doctors'], request=DoctorStatusSerializer, responses={200: DoctorSerializer})
@api_view(['PATCH', 'POST'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def update_doctor_status(request, doctor_id):
    serializer = DoctorStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    doctor = DoctorDirectoryService.update_status(doctor_id, serializer.validated_data['status'])
    return Response(DoctorSerializer(doctor, context=_context()).data)


@extend_schema(tags=['Doctors'], request=None, responses={200: DoctorSerializer(many=True)})
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def sync_schedule_statuses(request):
    """Take doctors offline whose schedule has ended; returns the changed doctors"""
    changed = DoctorDirectoryService.sync_schedule_statuses()
    return Response({
        'updated': len(changed),
        'doctors': DoctorSerializer(changed, many=True, context=_context()).data,
    })


@extend_schema(tags=['Doctors'], responses={200: DoctorSerializer, 404: OpenApiResponse(description="No doctor qualifies")})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def optimal_doctor(request):
    """Doctor the optimizer would assign to a new walk-in right now"""
    doctor = QueueManagementService.select_optimal_doctor()
    if doctor is None:
        return Response(
            {'error': 'No doctor is currently available for assignment', 'code': 'no_doctor_available'},
            status=status.HTTP_404_NOT_FOUND
        )
    return Response(DoctorSerializer(doctor, context=_context()).data)


@extend_schema(tags=['Doctors'], responses={200: OpenApiResponse(description="Doctor statistics")})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def doctor_stats(request):
    return Response(DoctorDirectoryService.get_stats())
