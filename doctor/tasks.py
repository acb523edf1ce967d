from celery import shared_task

from .services import DoctorDirectoryService


@shared_task
def sync_doctor_schedule_statuses():  # Periodic task taking doctors offline once their schedule has ended
    changed = DoctorDirectoryService.sync_schedule_statuses()
    return f"Set {len(changed)} doctors offline"
