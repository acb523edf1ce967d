from django.db import DatabaseError, connection
from django.http import JsonResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.reverse import reverse


@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request, format=None):
    return Response(
        {
            "queue": reverse("queue_management:queue_list", request=request, format=format),
            "appointments": reverse("appointments:appointment_list", request=request, format=format),
            "doctors": reverse("doctor:doctor_list", request=request, format=format),
            "analytics": reverse("analytics:overview", request=request, format=format),
            "schema": reverse("schema", request=request, format=format),
        }
    )


def health_check(request):
    health_status = {"status": "healthy"}

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            health_status["database"] = "connected"
    except DatabaseError as e:
        health_status["status"] = "unhealthy"
        health_status["database"] = f"error: {str(e)}"
        return JsonResponse(health_status, status=503)

    return JsonResponse(health_status)
