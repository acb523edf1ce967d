import uuid

from django.db import models
from django.utils import timezone

from core.constants import (
    APPOINTMENT_ACTIVE_STATUSES,
    APPOINTMENT_SCHEDULED,
    APPOINTMENT_STATUS_CHOICES,
    GENDER_CHOICES,
    PRIORITY_CHOICES,
    PRIORITY_NORMAL,
)
from doctor.models import Doctor


class Appointment(models.Model):  # Pre-booked consultation at one of a doctor's declared slots
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    patient_name = models.CharField(max_length=255)
    patient_phone = models.CharField(max_length=30)
    patient_email = models.EmailField(blank=True, default='')
    patient_age = models.PositiveIntegerField(null=True, blank=True)
    patient_gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True, default='')

    doctor = models.ForeignKey(
        Doctor,
        on_delete=models.CASCADE,
        related_name="appointments",
    )
    date = models.DateField(db_index=True)
    time = models.CharField(max_length=5, help_text="Slot label, HH:MM")

    status = models.CharField(max_length=20, choices=APPOINTMENT_STATUS_CHOICES, default=APPOINTMENT_SCHEDULED)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default=PRIORITY_NORMAL)

    notes = models.TextField(default='', blank=True)
    symptoms = models.TextField(default='', blank=True)
    diagnosis = models.TextField(default='', blank=True)
    prescription = models.TextField(default='', blank=True)
    consultation_fee = models.PositiveIntegerField(null=True, blank=True)
    is_follow_up = models.BooleanField(default=False)
    follow_up_date = models.DateField(null=True, blank=True)

    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:  # Meta class implementation
        db_table = "appointments"
        ordering = ["date", "time"]
        constraints = [
            models.UniqueConstraint(
                fields=["doctor", "date", "time"],
                condition=models.Q(status=APPOINTMENT_SCHEDULED),
                name="unique_scheduled_slot_per_doctor",
            ),
        ]
        indexes = [
            models.Index(fields=["doctor", "date"], name="appointments_doctor_date_idx"),
            models.Index(fields=["status"], name="appointments_status_idx"),
        ]

    def __str__(self):  # Return string representation
        return f"{self.patient_name} with {self.doctor_id} on {self.date} at {self.time}"

    @property
    def is_active(self):
        return self.status in APPOINTMENT_ACTIVE_STATUSES
