"""
Appointment API Views
Booking, rescheduling and cancellation of pre-booked consultations
"""
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.decorators import handle_scheduling_errors
from core.exceptions import ValidationError
from .serializers import (
    AppointmentCreateSerializer,
    AppointmentSerializer,
    AppointmentStatusSerializer,
    AppointmentUpdateSerializer,
    CancelAppointmentSerializer,
    RescheduleAppointmentSerializer,
)
from .services import AppointmentService


@extend_schema(tags=['Appointments'], request=AppointmentCreateSerializer, responses={201: AppointmentSerializer})
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def appointment_list(request):
    """List appointments (filterable) or book a new one"""
    if request.method == 'POST':
        serializer = AppointmentCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        appointment = AppointmentService.create_appointment(serializer.validated_data)
        return Response(AppointmentSerializer(appointment).data, status=status.HTTP_201_CREATED)

    params = request.query_params
    appointments = AppointmentService.list_appointments(
        doctor_id=params.get('doctor_id'),
        date=params.get('date'),
        status=params.get('status'),
        patient_name=params.get('patient_name'),
        date_from=params.get('date_from'),
        date_to=params.get('date_to'),
    )
    return Response(AppointmentSerializer(appointments, many=True).data)


@extend_schema(tags=['Appointments'], responses={200: AppointmentSerializer(many=True)})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def today_appointments(request):
    appointments = AppointmentService.list_today_appointments()
    return Response(AppointmentSerializer(appointments, many=True).data)


@extend_schema(tags=['Appointments'], responses={200: AppointmentSerializer(many=True)})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def upcoming_appointments(request):
    """Scheduled appointments over the next ?days= days (default 7)"""
    try:
        days = int(request.query_params.get('days', 7))
    except ValueError:
        raise ValidationError('days must be an integer')

    appointments = AppointmentService.list_upcoming_appointments(days=days)
    return Response(AppointmentSerializer(appointments, many=True).data)


@extend_schema(tags=['Appointments'], responses={200: AppointmentSerializer(many=True)})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def doctor_appointments(request, doctor_id):
    appointments = AppointmentService.list_doctor_appointments(
        doctor_id, date=request.query_params.get('date')
    )
    return Response(AppointmentSerializer(appointments, many=True).data)


@extend_schema(tags=['Appointments'], responses={200: OpenApiResponse(description="Appointment statistics")})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def appointment_stats(request):
    return Response(AppointmentService.get_stats())


@extend_schema(tags=['Appointments'], request=AppointmentUpdateSerializer, responses={200: AppointmentSerializer})
@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def appointment_detail(request, appointment_id):
    if request.method == 'GET':
        return Response(AppointmentSerializer(AppointmentService.get_appointment(appointment_id)).data)

    if request.method == 'DELETE':
        AppointmentService.delete_appointment(appointment_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = AppointmentUpdateSerializer(data=request.data, partial=True)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    appointment = AppointmentService.update_appointment(appointment_id, serializer.validated_data)
    return Response(AppointmentSerializer(appointment).data)


@extend_schema(tags=['Appointments'], request=AppointmentStatusSerializer, responses={200: AppointmentSerializer})
@api_view(['PATCH', 'POST'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def update_appointment_status(request, appointment_id):
    serializer = AppointmentStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    appointment = AppointmentService.update_status(appointment_id, serializer.validated_data['status'])
    return Response(AppointmentSerializer(appointment).data)


@extend_schema(tags=['Appointments'], request=CancelAppointmentSerializer, responses={200: AppointmentSerializer})
@api_view(['POST'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def cancel_appointment(request, appointment_id):
    serializer = CancelAppointmentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    appointment = AppointmentService.cancel_appointment(
        appointment_id, reason=serializer.validated_data.get('reason')
    )
    return Response(AppointmentSerializer(appointment).data)


@extend_schema(tags=['Appointments'], request=RescheduleAppointmentSerializer, responses={200: AppointmentSerializer})
@api_view(['POST'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def reschedule_appointment(request, appointment_id):
    serializer = RescheduleAppointmentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    appointment = AppointmentService.reschedule_appointment(
        appointment_id,
        serializer.validated_data['date'],
        serializer.validated_data['time'],
    )
    return Response(AppointmentSerializer(appointment).data)
