"""
Project URL configuration.

Surfaces
--------
- `/admin/`: Django admin (back-office only).
- `/health/`: readiness probe.
- `/api/users/csrf|login|logout|me/`: session auth for the `users` collection.
- `/api/`: routes generated from the site config (`content.urls`).
- `/api/schema/`, `/api/docs/`, `/api/redoc/`: OpenAPI schema & UIs.

Notes
-----
- Auth paths are listed before the generated routes; collection detail routes
  only match numeric ids, so `/api/users/me/` never reaches the `users` ViewSet.
"""

from __future__ import annotations

from django.contrib import admin
from django.urls import include, path

from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView,
)

from accounts.views import CsrfView, LoginView, LogoutView, MeView
from core.views import health

urlpatterns = [
    path("admin/", admin.site.urls),
    path("health/", health, name="health"),

    # OpenAPI / Docs
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),

    # Auth
    path("api/users/csrf/", CsrfView.as_view(), name="users-csrf"),
    path("api/users/login/", LoginView.as_view(), name="users-login"),
    path("api/users/logout/", LogoutView.as_view(), name="users-logout"),
    path("api/users/me/", MeView.as_view(), name="users-me"),

    # Configured collections and globals
    path("api/", include("content.urls")),
]
