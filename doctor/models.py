import uuid

from django.db import models
from django.utils import timezone

from core.constants import DOCTOR_AVAILABLE, GENDER_CHOICES, DOCTOR_STATUS_CHOICES


class Doctor(models.Model):  # Doctor record owned by the directory, referenced by queue entries and appointments
    """
    Doctor profile as seen by the scheduling engine.

    ``availability`` holds bookable slot labels (e.g. ``["09:00", "09:30"]``)
    and ``working_days`` holds weekday names (e.g. ``["Monday", "Tuesday"]``).
    Both are maintained by doctor management; the scheduling engine only
    reads them and may change ``status``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    specialization = models.CharField(max_length=100, db_index=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, default='other')
    location = models.CharField(max_length=255, blank=True, default='')
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=30, blank=True, default='')

    availability = models.JSONField(default=list, blank=True)
    working_days = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=20, choices=DOCTOR_STATUS_CHOICES, default=DOCTOR_AVAILABLE)
    is_active = models.BooleanField(default=True)

    license_number = models.CharField(max_length=100, blank=True, default='')
    experience = models.PositiveIntegerField(null=True, blank=True, help_text="Years of experience")
    consultation_fee = models.PositiveIntegerField(null=True, blank=True)
    consultation_duration = models.PositiveIntegerField(default=30, help_text="Duration in minutes")

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:  # Meta class implementation
        db_table = 'doctors'
        ordering = ['name']
        indexes = [
            models.Index(fields=['is_active', 'status'], name='doctors_active_status_idx'),
        ]

    def __str__(self):  # Return string representation
        return f"Dr. {self.name} - {self.specialization}"
