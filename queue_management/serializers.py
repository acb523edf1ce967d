from django.utils import timezone
from rest_framework import serializers

from core.constants import PRIORITY_CHOICES, QUEUE_STATUS_CHOICES
from .escalation import effective_priority, is_escalated, wait_minutes
from .models import QueueEntry


class QueueEntrySerializer(serializers.ModelSerializer):  # Serializer for QueueEntry data
    """
    Read representation of a queue entry.

    Escalation fields are computed against ``context['now']`` so that a
    whole listing is evaluated at a single instant.
    """
    doctor = serializers.SerializerMethodField()
    effective_priority = serializers.SerializerMethodField()
    is_escalated = serializers.SerializerMethodField()
    wait_minutes = serializers.SerializerMethodField()

    class Meta:  # Meta class implementation
        model = QueueEntry
        fields = [
            'id',
            'queue_number',
            'queue_date',
            'patient_name',
            'patient_phone',
            'patient_age',
            'status',
            'priority',
            'effective_priority',
            'is_escalated',
            'wait_minutes',
            'reason',
            'notes',
            'doctor',
            'called_at',
            'consultation_started_at',
            'consultation_ended_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def _now(self):
        return self.context.get('now') or timezone.now()

    def get_doctor(self, obj) -> dict:
        """Get doctor information"""
        if obj.doctor:
            return {
                'id': str(obj.doctor.id),
                'name': obj.doctor.name,
                'specialization': obj.doctor.specialization,
                'status': obj.doctor.status,
            }
        return None

    def get_effective_priority(self, obj) -> str:
        return effective_priority(obj, self._now())

    def get_is_escalated(self, obj) -> bool:
        return is_escalated(obj, self._now())

    def get_wait_minutes(self, obj) -> int:
        return wait_minutes(obj, self._now())


class QueueEntryCreateSerializer(serializers.Serializer):
    patient_name = serializers.CharField(max_length=255)
    patient_phone = serializers.CharField(max_length=30)
    patient_age = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    priority = serializers.ChoiceField(choices=PRIORITY_CHOICES, required=False)
    reason = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    doctor_id = serializers.UUIDField(required=False, allow_null=True)


class QueueEntryUpdateSerializer(serializers.Serializer):
    patient_name = serializers.CharField(max_length=255, required=False)
    patient_phone = serializers.CharField(max_length=30, required=False)
    patient_age = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    priority = serializers.ChoiceField(choices=PRIORITY_CHOICES, required=False)
    reason = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    doctor_id = serializers.UUIDField(required=False, allow_null=True)


class QueueStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=QUEUE_STATUS_CHOICES)


class AssignDoctorSerializer(serializers.Serializer):
    doctor_id = serializers.UUIDField()


class CallNextSerializer(serializers.Serializer):
    doctor_id = serializers.UUIDField(required=False, allow_null=True)
