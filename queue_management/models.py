"""
Queue Management Models
Walk-in patients waiting for a consultation, numbered per calendar day.
"""
import uuid

from django.db import models
from django.utils import timezone

from core.constants import (
    PRIORITY_CHOICES,
    PRIORITY_NORMAL,
    QUEUE_ACTIVE_STATUSES,
    QUEUE_STATUS_CHOICES,
    QUEUE_TERMINAL_STATUSES,
    QUEUE_WAITING,
)
from doctor.models import Doctor


class QueueEntry(models.Model):  # A walk-in patient's place in the day's waiting line
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    queue_number = models.PositiveIntegerField()
    queue_date = models.DateField(db_index=True)

    patient_name = models.CharField(max_length=255)
    patient_phone = models.CharField(max_length=30)
    patient_age = models.PositiveIntegerField(null=True, blank=True)

    status = models.CharField(max_length=20, choices=QUEUE_STATUS_CHOICES, default=QUEUE_WAITING)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default=PRIORITY_NORMAL)
    reason = models.TextField(blank=True, default='')
    notes = models.TextField(blank=True, default='')

    doctor = models.ForeignKey(
        Doctor,
        on_delete=models.SET_NULL,
        related_name='queue_entries',
        null=True,
        blank=True,
    )

    called_at = models.DateTimeField(null=True, blank=True)
    consultation_started_at = models.DateTimeField(null=True, blank=True)
    consultation_ended_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:  # Meta class implementation
        db_table = 'queue_entries'
        ordering = ['queue_date', 'queue_number']
        constraints = [
            models.UniqueConstraint(
                fields=['queue_number', 'queue_date'],
                name='unique_queue_number_per_day',
            ),
        ]
        indexes = [
            models.Index(fields=['status', 'doctor'], name='queue_status_doctor_idx'),
        ]

    def __str__(self):  # Return string representation
        return f"#{self.queue_number} ({self.queue_date}) {self.patient_name}"

    @property
    def is_active(self):
        return self.status in QUEUE_ACTIVE_STATUSES

    @property
    def is_terminal(self):
        return self.status in QUEUE_TERMINAL_STATUSES

    @property
    def consultation_duration(self):
        """Minutes spent in consultation, 0 until the consultation has ended"""
        if self.consultation_started_at and self.consultation_ended_at:
            delta = self.consultation_ended_at - self.consultation_started_at
            return int(delta.total_seconds() // 60)
        return 0
