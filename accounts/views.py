"""
Session auth endpoints for the `users` auth collection.

Routes (see `cms_site.urls`)
----------------------------
- `GET  /api/users/csrf/`   prime the CSRF cookie (204, token in `X-CSRFToken`).
- `POST /api/users/login/`  email + password session login.
- `POST /api/users/logout/` idempotent logout.
- `GET  /api/users/me/`     current user (401 when anonymous).

Session-authenticated unsafe calls are CSRF-checked by `SessionAuthentication`.
"""

from __future__ import annotations

from django.contrib.auth import authenticate, login as dj_login, logout as dj_logout
from django.middleware.csrf import get_token
from django.utils.translation import gettext_lazy as _
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions, serializers, status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from .serializers import UserPublicSerializer, user_payload


class _LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class CsrfView(APIView):
    """
    GET only: prime a CSRF cookie and expose the token via header.
    Returns 204 with no body.
    """
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        tags=["Users"],
        operation_id="users_csrf",
        summary="Prime CSRF cookie",
        responses={204: OpenApiResponse(description="CSRF cookie set")},
    )
    def get(self, request, *args, **kwargs):
        token = get_token(request)
        resp = Response(status=status.HTTP_204_NO_CONTENT)
        resp["X-CSRFToken"] = token
        return resp


class LoginView(APIView):
    """
    Session login using Django auth.
    Throttled with scope `auth-login`.
    """
    permission_classes = [permissions.AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth-login"

    @extend_schema(
        tags=["Users"],
        operation_id="users_login",
        summary="Log in (session-based)",
        request=_LoginSerializer,
        responses={
            200: UserPublicSerializer,
            400: OpenApiResponse(
                description='{"detail":"Invalid email or password.","code":"invalid_credentials"}'
            ),
            429: OpenApiResponse(description="Too many attempts (throttled)"),
        },
    )
    def post(self, request, *args, **kwargs):
        ser = _LoginSerializer(data=request.data)
        user = None
        if ser.is_valid():
            user = authenticate(
                request,
                email=ser.validated_data["email"],
                password=ser.validated_data["password"],
            )
        if user is None or not user.is_active:
            return Response(
                {"detail": _("Invalid email or password."), "code": "invalid_credentials"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        dj_login(request, user)
        return Response(user_payload(user), status=status.HTTP_200_OK)


class LogoutView(APIView):
    """Session logout (idempotent)."""
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        tags=["Users"],
        operation_id="users_logout",
        summary="Log out",
        request=None,
        responses={204: OpenApiResponse(description="Logged out")},
    )
    def post(self, request, *args, **kwargs):
        dj_logout(request)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(APIView):
    """Return the current authenticated user."""
    # Anonymous callers get an explicit 401 below.
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        tags=["Users"],
        operation_id="users_me",
        summary="Current user",
        responses={200: UserPublicSerializer, 401: OpenApiResponse(description="Not authenticated")},
    )
    def get(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return Response({"detail": _("Not authenticated.")}, status=status.HTTP_401_UNAUTHORIZED)
        return Response(user_payload(request.user), status=status.HTTP_200_OK)
