from rest_framework import serializers

from core.constants import APPOINTMENT_STATUS_CHOICES, GENDER_CHOICES, PRIORITY_CHOICES
from .models import Appointment

SLOT_PATTERN = r'^([01]\d|2[0-3]):[0-5]\d$'


class AppointmentSerializer(serializers.ModelSerializer):  # Serializer for Appointment data
    doctor = serializers.SerializerMethodField()

    class Meta:  # Meta class implementation
        model = Appointment
        fields = "__all__"

    def get_doctor(self, obj) -> dict:
        """Get doctor information"""
        return {
            'id': str(obj.doctor.id),
            'name': obj.doctor.name,
            'specialization': obj.doctor.specialization,
        }


class AppointmentCreateSerializer(serializers.Serializer):
    patient_name = serializers.CharField(max_length=255)
    patient_phone = serializers.CharField(max_length=30)
    patient_email = serializers.EmailField(required=False, allow_blank=True)
    patient_age = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    patient_gender = serializers.ChoiceField(choices=GENDER_CHOICES, required=False, allow_blank=True)
    doctor_id = serializers.UUIDField()
    date = serializers.DateField()
    time = serializers.RegexField(SLOT_PATTERN, max_length=5)
    priority = serializers.ChoiceField(choices=PRIORITY_CHOICES, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    symptoms = serializers.CharField(required=False, allow_blank=True)
    consultation_fee = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    is_follow_up = serializers.BooleanField(required=False)
    follow_up_date = serializers.DateField(required=False, allow_null=True)


class AppointmentUpdateSerializer(AppointmentCreateSerializer):
    diagnosis = serializers.CharField(required=False, allow_blank=True)
    prescription = serializers.CharField(required=False, allow_blank=True)


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=APPOINTMENT_STATUS_CHOICES)


class CancelAppointmentSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True)


class RescheduleAppointmentSerializer(serializers.Serializer):
    date = serializers.DateField()
    time = serializers.RegexField(SLOT_PATTERN, max_length=5)
