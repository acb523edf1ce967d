import django_filters

from core.constants import PRIORITY_CHOICES, QUEUE_ACTIVE_STATUSES, QUEUE_STATUS_CHOICES
from .models import QueueEntry


class QueueEntryFilter(django_filters.FilterSet):  # Listing filters for queue entries
    doctor_id = django_filters.UUIDFilter(field_name='doctor_id')
    status = django_filters.ChoiceFilter(choices=QUEUE_STATUS_CHOICES)
    priority = django_filters.ChoiceFilter(choices=PRIORITY_CHOICES)
    active_only = django_filters.BooleanFilter(method='filter_active_only')

    class Meta:  # Meta class implementation
        model = QueueEntry
        fields = []

    def filter_active_only(self, queryset, name, value):
        if value:
            return queryset.filter(status__in=QUEUE_ACTIVE_STATUSES)
        return queryset
