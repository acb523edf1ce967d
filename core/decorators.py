import logging
from functools import wraps

from rest_framework.response import Response

from core.exceptions import SchedulingError

logger = logging.getLogger(__name__)


def handle_scheduling_errors(view_func):  # Map domain errors raised by services to API responses
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):  # Run the view and translate SchedulingError subclasses
        try:
            return view_func(request, *args, **kwargs)
        except SchedulingError as exc:
            logger.info(
                f"{request.method} {request.path} rejected: {exc.code} ({exc.message})"
            )
            return Response(exc.to_dict(), status=exc.status_code)

    return wrapper
