from django.apps import AppConfig


class DoctorConfig(AppConfig):  # Application configuration for the doctor app
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'doctor'
    verbose_name = 'Doctors'
