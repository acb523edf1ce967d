"""
Appointment URLs
Handles booking, rescheduling, cancellation and appointment listings
"""
from django.urls import path
from appointments import views

app_name = 'appointments'

urlpatterns = [
    path('api/v1/appointments/', views.appointment_list, name='appointment_list'),
    path('api/v1/appointments/today/', views.today_appointments, name='today_appointments'),
    path('api/v1/appointments/upcoming/', views.upcoming_appointments, name='upcoming_appointments'),
    path('api/v1/appointments/stats/', views.appointment_stats, name='appointment_stats'),
    path('api/v1/appointments/doctor/<uuid:doctor_id>/', views.doctor_appointments, name='doctor_appointments'),
    path('api/v1/appointments/<uuid:appointment_id>/', views.appointment_detail, name='appointment_detail'),
    path('api/v1/appointments/<uuid:appointment_id>/status/', views.update_appointment_status, name='update_appointment_status'),
    path('api/v1/appointments/<uuid:appointment_id>/cancel/', views.cancel_appointment, name='cancel_appointment'),
    path('api/v1/appointments/<uuid:appointment_id>/reschedule/', views.reschedule_appointment, name='reschedule_appointment'),
]
