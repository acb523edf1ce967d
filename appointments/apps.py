from django.apps import AppConfig


class AppointmentsConfig(AppConfig):  # Application configuration for the appointments app
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'appointments'
    verbose_name = 'Appointments'
