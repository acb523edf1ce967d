from django.contrib import admin
from .models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):  # Admin configuration for Appointment model
    list_display = ('id', 'patient_name', 'doctor', 'date', 'time', 'status', 'priority', 'consultation_fee')
    list_filter = ('status', 'priority', 'date')
    search_fields = ('patient_name', 'patient_email', 'doctor__name', 'notes')
    date_hierarchy = 'date'
    ordering = ('-date', '-time')
