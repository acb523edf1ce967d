"""
Doctor Directory URLs
"""
from django.urls import path
from doctor import views

app_name = 'doctor'

urlpatterns = [
    path('api/v1/doctors/', views.doctor_list, name='doctor_list'),
    path('api/v1/doctors/stats/', views.doctor_stats, name='doctor_stats'),
    path('api/v1/doctors/optimal/', views.optimal_doctor, name='optimal_doctor'),
    path('api/v1/doctors/sync-status/', views.sync_schedule_statuses, name='sync_schedule_statuses'),
    path('api/v1/doctors/<uuid:doctor_id>/', views.doctor_detail, name='doctor_detail'),
    path('api/v1/doctors/<uuid:doctor_id>/status/', views.update_doctor_status, name='update_doctor_status'),
]
