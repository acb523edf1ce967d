"""
Central constants file for the clinic flow platform.
Ensures consistency across all models and prevents choice list divergence.
"""

# Priority Choices - Shared by queue entries and appointments
PRIORITY_LOW = 'low'
PRIORITY_NORMAL = 'normal'
PRIORITY_HIGH = 'high'
PRIORITY_URGENT = 'urgent'

PRIORITY_CHOICES = [
    (PRIORITY_LOW, 'Low'),
    (PRIORITY_NORMAL, 'Normal'),
    (PRIORITY_HIGH, 'High'),
    (PRIORITY_URGENT, 'Urgent'),
]

# Ordinal scale: LOW < NORMAL < HIGH < URGENT
PRIORITY_RANK = {
    PRIORITY_LOW: 0,
    PRIORITY_NORMAL: 1,
    PRIORITY_HIGH: 2,
    PRIORITY_URGENT: 3,
}

# Queue Status Choices
QUEUE_WAITING = 'waiting'
QUEUE_CALLED = 'called'
QUEUE_IN_CONSULTATION = 'in_consultation'
QUEUE_COMPLETED = 'completed'
QUEUE_CANCELLED = 'cancelled'
QUEUE_NO_SHOW = 'no_show'

QUEUE_STATUS_CHOICES = [
    (QUEUE_WAITING, 'Waiting'),
    (QUEUE_CALLED, 'Called'),
    (QUEUE_IN_CONSULTATION, 'In Consultation'),
    (QUEUE_COMPLETED, 'Completed'),
    (QUEUE_CANCELLED, 'Cancelled'),
    (QUEUE_NO_SHOW, 'No Show'),
]

QUEUE_ACTIVE_STATUSES = (QUEUE_WAITING, QUEUE_CALLED, QUEUE_IN_CONSULTATION)
QUEUE_TERMINAL_STATUSES = (QUEUE_COMPLETED, QUEUE_CANCELLED, QUEUE_NO_SHOW)

# Appointment Status Choices
APPOINTMENT_SCHEDULED = 'scheduled'
APPOINTMENT_CONFIRMED = 'confirmed'
APPOINTMENT_IN_PROGRESS = 'in_progress'
APPOINTMENT_COMPLETED = 'completed'
APPOINTMENT_CANCELLED = 'cancelled'
APPOINTMENT_NO_SHOW = 'no_show'

APPOINTMENT_STATUS_CHOICES = [
    (APPOINTMENT_SCHEDULED, 'Scheduled'),
    (APPOINTMENT_CONFIRMED, 'Confirmed'),
    (APPOINTMENT_IN_PROGRESS, 'In Progress'),
    (APPOINTMENT_COMPLETED, 'Completed'),
    (APPOINTMENT_CANCELLED, 'Cancelled'),
    (APPOINTMENT_NO_SHOW, 'No Show'),
]

APPOINTMENT_ACTIVE_STATUSES = (APPOINTMENT_SCHEDULED, APPOINTMENT_CONFIRMED, APPOINTMENT_IN_PROGRESS)

# Doctor Status Choices
DOCTOR_AVAILABLE = 'available'
DOCTOR_BUSY = 'busy'
DOCTOR_OFFLINE = 'offline'

DOCTOR_STATUS_CHOICES = [
    (DOCTOR_AVAILABLE, 'Available'),
    (DOCTOR_BUSY, 'Busy'),
    (DOCTOR_OFFLINE, 'Offline'),
]

GENDER_CHOICES = [
    ('male', 'Male'),
    ('female', 'Female'),
    ('other', 'Other'),
]

# Weekday names in date.weekday() order
WEEKDAYS = [
    'monday',
    'tuesday',
    'wednesday',
    'thursday',
    'friday',
    'saturday',
    'sunday',
]
