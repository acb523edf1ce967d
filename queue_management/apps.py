from django.apps import AppConfig


class QueueManagementConfig(AppConfig):  # Application configuration for the queue_management app
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'queue_management'
    verbose_name = 'Queue Management'
