"""
Analytics API Views
Front-desk dashboard statistics over queue entries, appointments and doctors
"""
from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.decorators import handle_scheduling_errors
from core.exceptions import ValidationError
from .services import StatisticsService

DATE_PARAMETER = OpenApiParameter(name='date', type=str, description='Day to report on (YYYY-MM-DD), defaults to today')


def _requested_day(request):
    value = request.query_params.get('date')
    if not value:
        return None
    try:
        day = parse_date(value)
    except ValueError:
        day = None
    if day is None:
        raise ValidationError(f"Invalid date: {value}")
    return day


@extend_schema(tags=['Analytics'], parameters=[DATE_PARAMETER], responses={200: OpenApiResponse(description="Queue statistics")})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def queue_stats(request):
    return Response(StatisticsService.get_queue_stats(day=_requested_day(request)))


@extend_schema(tags=['Analytics'], parameters=[DATE_PARAMETER], responses={200: OpenApiResponse(description="Appointment statistics")})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def appointment_stats(request):
    return Response(StatisticsService.get_appointment_stats(day=_requested_day(request)))


@extend_schema(tags=['Analytics'], parameters=[DATE_PARAMETER], responses={200: OpenApiResponse(description="Dashboard overview")})
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@handle_scheduling_errors
def dashboard_overview(request):
    """Queue, appointment and doctor statistics in one payload"""
    return Response(StatisticsService.get_overview(day=_requested_day(request)))
