"""
Core middleware for request safety and observability.

Components
----------
- `RequestSizeLimitMiddleware`:
    * Rejects document writes whose declared body exceeds `MAX_REQUEST_BYTES`
      with a pre-rendered 413 JSON response, before DRF parses anything.
    * Applies to POST/PUT/PATCH only and trusts `Content-Length` when present.

- `RequestIDLogMiddleware`:
    * Reads `X-Request-ID` (or generates one) and reflects it in the response.
    * Stores the id in a contextvar for use by `core.logging.RequestIDFilter`,
      so `content.api` write logs carry the same id as the request line.
    * Logs one structured line per request on `content.request`.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Callable, Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response

from .logging import request_id_var

logger = logging.getLogger("content.request")

_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._\-]{1,200}$")

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def _coerce_request_id(raw: str | None) -> str:
    """Keep a client-provided request id when it is a safe token, else mint one."""
    if raw and _SAFE_REQUEST_ID.match(raw):
        return raw
    return uuid.uuid4().hex


def _declared_length(request: HttpRequest) -> Optional[int]:
    raw = request.META.get("CONTENT_LENGTH")
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


class RequestSizeLimitMiddleware:
    """
    Reject overly large request bodies with 413, before any parsing.

    - Missing or unparsable Content-Length is let through.
    - A limit of 0 disables the check.
    - Returns a rendered DRF Response so APIClient exposes `.data`.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response
        self.max_bytes: int = int(getattr(settings, "MAX_REQUEST_BYTES", 2_000_000))

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if request.method.upper() in _BODY_METHODS and self.max_bytes > 0:
            length = _declared_length(request)
            if length is not None and length > self.max_bytes:
                return self._too_large()
        return self.get_response(request)

    def _too_large(self) -> Response:
        resp = Response(
            {
                "detail": f"Request entity too large. Max {self.max_bytes} bytes.",
                "code": "request_too_large",
                "max_bytes": self.max_bytes,
            },
            status=413,
        )
        resp.accepted_renderer = JSONRenderer()
        resp.accepted_media_type = "application/json"
        resp.renderer_context = {}
        resp.render()
        return resp


class RequestIDLogMiddleware:
    """
    - Binds a request id to `request.request_id` and the logging contextvar.
    - Adds the `X-Request-ID` response header.
    - Logs method, path, status, user id and latency (ms) once per request.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        rid = _coerce_request_id(request.headers.get("X-Request-ID"))
        request.request_id = rid
        token = request_id_var.set(rid)

        start = time.perf_counter()
        try:
            response = self.get_response(request)
        finally:
            request_id_var.reset(token)
        duration_ms = int((time.perf_counter() - start) * 1000)

        response.headers["X-Request-ID"] = rid

        user = getattr(request, "user", None)
        user_id = user.pk if getattr(user, "is_authenticated", False) else None

        logger.info(
            "request",
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.path,
                "status": getattr(response, "status_code", 0),
                "user_id": user_id,
                "duration_ms": duration_ms,
            },
        )
        return response
