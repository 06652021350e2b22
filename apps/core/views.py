import structlog
from django.db import DatabaseError, connections
from django.http import JsonResponse
from django.views.decorators.http import require_GET

logger = structlog.get_logger(__name__)


@require_GET
def healthz(request):
    """Liveness probe: the booking store is only usable if the database answers."""
    database = connections["default"]
    try:
        with database.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as exc:
        logger.error("healthz.database_unreachable", vendor=database.vendor, error=str(exc))
        return JsonResponse({"status": "unhealthy", "database": database.vendor}, status=503)
    return JsonResponse({"status": "healthy", "database": database.vendor})
