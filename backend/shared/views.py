from __future__ import annotations

import platform
from typing import Dict

from django.db import connections
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

START_TIME = timezone.now()


class HealthCheckView(APIView):
    """Liveness probe: reports uptime and whether each configured database answers."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        db_payload = self._database_status()
        now = timezone.now()
        payload = {
            "status": "ok" if db_payload["ok"] else "degraded",
            "service": "stockline",
            "uptime_seconds": int((now - START_TIME).total_seconds()),
            "timestamp": now.isoformat(),
            "python": platform.python_version(),
            "database": db_payload,
        }
        http_status = status.HTTP_200_OK if db_payload["ok"] else status.HTTP_503_SERVICE_UNAVAILABLE
        return Response(payload, status=http_status)

    def _database_status(self) -> Dict:
        payload = {"ok": True, "details": {}}
        for alias in connections:
            try:
                with connections[alias].cursor() as cursor:
                    cursor.execute("SELECT 1")
                    cursor.fetchone()
                payload["details"][alias] = "connected"
            except Exception as exc:
                payload["ok"] = False
                payload["details"][alias] = f"error: {exc}"
        return payload
