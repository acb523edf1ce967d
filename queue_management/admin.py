from django.contrib import admin
from .models import QueueEntry


@admin.register(QueueEntry)
class QueueEntryAdmin(admin.ModelAdmin):  # Admin configuration for QueueEntry model
    list_display = ('queue_number', 'queue_date', 'patient_name', 'priority', 'status', 'doctor', 'created_at')
    list_filter = ('status', 'priority', 'queue_date')
    search_fields = ('patient_name', 'patient_phone', 'doctor__name')
    date_hierarchy = 'queue_date'
    ordering = ('-queue_date', 'queue_number')
    readonly_fields = ('queue_number', 'queue_date', 'called_at', 'consultation_started_at', 'consultation_ended_at', 'created_at', 'updated_at')
