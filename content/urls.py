"""
URL patterns for the configured collections and globals (mounted under `/api/`).

Routes are built once from the active `SiteConfig` when the URLconf loads:

    <collection>/                        list, create
    <collection>/<id>/                   retrieve, partial_update, destroy
    <collection>/versions/               version list     (versioned only)
    <collection>/versions/<id>/          version detail
    <collection>/versions/<id>/restore/  restore
    globals/<slug>/                      retrieve (GET), update (POST/PATCH)
    globals/<slug>/versions/...          as above, for the global
"""

from __future__ import annotations

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .registry import get_site_config
from .views import CollectionViewSet, GlobalViewSet, VersionViewSet


def build_urlpatterns(site_config=None):
    config = site_config or get_site_config()
    router = DefaultRouter()

    for entity in config.collections:
        # Versions first: "<slug>/versions/" must not be read as a document id.
        if entity.versions and not entity.auth:
            router.register(
                rf"{entity.slug}/versions",
                VersionViewSet.for_entity(entity, site_config),
                basename=f"{entity.slug}-version",
            )
        router.register(
            entity.slug,
            CollectionViewSet.for_collection(entity, site_config),
            basename=entity.slug,
        )

    patterns = []
    for entity in config.globals:
        if entity.versions:
            router.register(
                rf"globals/{entity.slug}/versions",
                VersionViewSet.for_entity(entity, site_config),
                basename=f"global-{entity.slug}-version",
            )
        view = GlobalViewSet.for_global(entity, site_config).as_view(
            {"get": "retrieve", "post": "partial_update", "patch": "partial_update"}
        )
        patterns.append(path(f"globals/{entity.slug}/", view, name=f"global-{entity.slug}"))

    return patterns + [path("", include(router.urls))]


urlpatterns = build_urlpatterns()
