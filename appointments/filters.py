import django_filters

from core.constants import APPOINTMENT_STATUS_CHOICES
from .models import Appointment


class AppointmentFilter(django_filters.FilterSet):  # Listing filters for appointments
    doctor_id = django_filters.UUIDFilter(field_name='doctor_id')
    date = django_filters.DateFilter(field_name='date')
    status = django_filters.ChoiceFilter(choices=APPOINTMENT_STATUS_CHOICES)
    patient_name = django_filters.CharFilter(lookup_expr='icontains')
    date_from = django_filters.DateFilter(field_name='date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='date', lookup_expr='lte')

    class Meta:  # Meta class implementation
        model = Appointment
        fields = []
