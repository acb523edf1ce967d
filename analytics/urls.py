from django.urls import path
from . import views

app_name = "analytics"

urlpatterns = [
    path("api/v1/analytics/queue/", views.queue_stats, name="queue-stats"),
    path("api/v1/analytics/appointments/", views.appointment_stats, name="appointment-stats"),
    path("api/v1/analytics/overview/", views.dashboard_overview, name="overview"),
]
