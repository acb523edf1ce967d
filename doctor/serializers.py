from django.utils import timezone
from rest_framework import serializers

from core.constants import DOCTOR_STATUS_CHOICES
from .models import Doctor
from .schedule import effective_status, is_schedule_available


class DoctorSerializer(serializers.ModelSerializer):  # Serializer for Doctor data
    """
    Doctor record plus its schedule-derived state, evaluated at
    ``context['local_now']`` when given.
    """
    is_schedule_available = serializers.SerializerMethodField()
    effective_status = serializers.SerializerMethodField()

    class Meta:  # Meta class implementation
        model = Doctor
        fields = [
            "id",
            "name",
            "specialization",
            "gender",
            "location",
            "email",
            "phone",
            "availability",
            "working_days",
            "status",
            "effective_status",
            "is_schedule_available",
            "is_active",
            "license_number",
            "experience",
            "consultation_fee",
            "consultation_duration",
        ]
        read_only_fields = fields

    def _local_now(self):
        return self.context.get('local_now') or timezone.localtime()

    def get_is_schedule_available(self, obj) -> bool:
        return is_schedule_available(obj, self._local_now())

    def get_effective_status(self, obj) -> str:
        return effective_status(obj, self._local_now())


class DoctorStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=DOCTOR_STATUS_CHOICES)
