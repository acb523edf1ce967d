"""
Queue Management URLs
Handles walk-in queue entries, patient calling, and doctor assignment
"""
from django.urls import path
from queue_management import views

app_name = 'queue_management'

urlpatterns = [
    # Queue entries
    path('api/v1/queue/', views.queue_list, name='queue_list'),
    path('api/v1/queue/active/', views.active_queue, name='active_queue'),
    path('api/v1/queue/waiting/', views.waiting_queue, name='waiting_queue'),
    path('api/v1/queue/number/<int:queue_number>/', views.queue_by_number, name='queue_by_number'),
    path('api/v1/queue/<uuid:entry_id>/', views.queue_detail, name='queue_detail'),
    path('api/v1/queue/<uuid:entry_id>/position/', views.queue_position, name='queue_position'),

    # Provider actions
    path('api/v1/queue/call-next/', views.call_next_patient, name='call_next_patient'),
    path('api/v1/queue/<uuid:entry_id>/status/', views.update_queue_status, name='update_queue_status'),
    path('api/v1/queue/<uuid:entry_id>/assign/', views.assign_doctor, name='assign_doctor'),
    path('api/v1/queue/<uuid:entry_id>/auto-assign/', views.auto_assign_doctor, name='auto_assign_doctor'),
]
