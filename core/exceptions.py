"""
Domain errors raised by the scheduling services.

Each error kind carries a stable code and HTTP status so callers can tell
"try again" (conflict) from "fix input" (validation) from "not found".
"""
from rest_framework import status


class SchedulingError(Exception):
    """Base class for all scheduling engine errors"""
    status_code = status.HTTP_400_BAD_REQUEST
    code = 'scheduling_error'

    def __init__(self, message='', code=None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class NotFoundError(SchedulingError):
    status_code = status.HTTP_404_NOT_FOUND
    code = 'not_found'


class ConflictError(SchedulingError):
    status_code = status.HTTP_409_CONFLICT
    code = 'conflict'


class ValidationError(SchedulingError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = 'validation_error'


class InvalidTransitionError(ValidationError):
    code = 'invalid_transition'


class UnassignedQueueError(ValidationError):
    """Waiting patients exist but none of them has a doctor yet"""
    code = 'no_doctors_assigned'


class DoctorUnavailableError(SchedulingError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = 'doctor_unavailable'
