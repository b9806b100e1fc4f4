"""Core utility views (unauthenticated).

Currently exposes:
- `health`: lightweight readiness endpoint that checks DB connectivity and
  returns a minimal JSON payload. Intended for load balancers/k8s probes.

Security
--------
- Public; payload contains no sensitive data and no per-request state.
"""

from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.utils.timezone import now


def health(request):
    """
    Lightweight health endpoint (no auth).
    Checks DB connectivity and returns a simple JSON status.

    Returns:
        200 JSON when DB is reachable; 503 JSON when a DB error is raised.
    """
    status = 200
    payload = {
        "app": "community-cms",
        "time": now().isoformat(),
        "db": "ok",
    }
    try:
        connection.ensure_connection()
    except DatabaseError as exc:
        payload["db"] = "down"
        payload["error"] = str(exc)
        status = 503
    return JsonResponse(payload, status=status)
