from django.contrib import admin
from .models import Doctor


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):  # Admin configuration for Doctor model
    list_display = ('name', 'specialization', 'email', 'status', 'is_active', 'consultation_duration')
    list_filter = ('status', 'is_active', 'specialization')
    search_fields = ('name', 'email', 'specialization', 'license_number')
    ordering = ('name',)
