import time
from typing import Any, Dict

import structlog
from django.core.cache import cache
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

logger = structlog.get_logger()


def health_check(request: HttpRequest) -> JsonResponse:
    """Liveness/readiness check.

    ``database`` and ``cache`` being down makes the service unhealthy.
    A catalog without a default status only degrades it: existing orders can
    still move through the workflow, new orders cannot be created.
    """
    services: Dict[str, Dict[str, Any]] = {}
    overall_healthy = True

    # Check database
    try:
        start = time.monotonic()
        conn = connections["default"]
        conn.ensure_connection()
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        services["database"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except DatabaseError:
        services["database"] = {"status": "down"}
        overall_healthy = False
        logger.error("health_check_db_failure")

    # Check cache
    try:
        start = time.monotonic()
        cache.set("_health_check", "ok", 10)
        result = cache.get("_health_check")
        if result != "ok":
            raise ConnectionError("Cache read failed")
        services["cache"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except Exception:
        services["cache"] = {"status": "down"}
        overall_healthy = False
        logger.error("health_check_cache_failure")

    # Check status catalog
    if services["database"]["status"] == "up":
        from modules.statuses.models import StatusDefinition

        default = StatusDefinition.objects.filter(is_default=True).first()
        services["status_catalog"] = {
            "status": "up" if default else "degraded",
            "default_status": default.value if default else None,
        }

    status_code = 200 if overall_healthy else 503

    logger.info(
        "health_check_completed", status="healthy" if overall_healthy else "unhealthy"
    )

    return JsonResponse(
        {
            "status": "healthy" if overall_healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=status_code,
    )


class CurrentUserView(APIView):
    """Echo the authenticated principal; 401 without a valid JWT."""

    permission_classes = [IsAuthenticated]

    def get(self, request: HttpRequest) -> Response:
        return Response(
            {
                "message": "authenticated",
                "user": str(request.user),
            }
        )
