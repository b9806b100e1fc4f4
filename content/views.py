"""
REST views generated from the site config.

Surfaces
--------
- `CollectionViewSet.for_collection(entity)`: one ViewSet class per configured
  collection (`/api/<slug>/`, `/api/<slug>/<id>/`).
- `VersionViewSet.for_entity(entity)`: read-only version listing with
  django-filter params plus a `restore` action (`/api/<slug>/versions/`,
  `/api/globals/<slug>/versions/`).
- `GlobalViewSet.for_global(entity)`: retrieve/update of a global
  (`/api/globals/<slug>/`).

Every action goes through `ContentAPI` with `override_access=False`, so the
entity's access callables decide. `EntityAccessPermission` rejects early at the
view level; the API re-checks with the document id.

Query params
------------
- `draft=true`: draft read / draft save.
- `depth=N`: relationship population depth (0..10).
- Lists: `page`, `limit`, `sort` and `<field>=<value>` equality filters.
"""

from __future__ import annotations

from typing import Optional

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import (
    OpenApiParameter,
    extend_schema,
    extend_schema_view,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.filters import OrderingFilter
from rest_framework.response import Response

from core.permissions import EntityAccessPermission

from .api import DEFAULT_DEPTH, DEFAULT_LIMIT, MAX_DEPTH, ContentAPI
from .config import CHECKBOX, NUMBER, RELATIONSHIP, CollectionConfig, GlobalConfig, SiteConfig
from .filters import VersionFilter
from .models import Version
from .registry import get_site_config
from .schema import (
    DEPTH_PARAM,
    DRAFT_PARAM,
    ERROR_RESPONSE,
    LIMIT_PARAM,
    PAGE_PARAM,
    SORT_PARAM,
    VALIDATION_ERROR_RESPONSE,
    paginated,
)
from .serializers import VersionSerializer, document_serializer

# Query params that are never treated as field filters on list endpoints.
RESERVED_QUERY_PARAMS = frozenset({"draft", "depth", "page", "limit", "sort", "format"})

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def parse_bool(value, name: str) -> bool:
    normalized = str(value).strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ValidationError({name: ["Must be a boolean (true/false)."]})


def parse_int(value, name: str, *, minimum: int = 0, maximum: Optional[int] = None) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError({name: ["Must be an integer."]})
    if number < minimum:
        raise ValidationError({name: [f"Must be >= {minimum}."]})
    if maximum is not None:
        number = min(number, maximum)
    return number


class EntityViewMixin:
    """Shared wiring: access gate, site config lookup, `draft`/`depth` parsing."""

    permission_classes = [EntityAccessPermission]
    entity_config = None
    site_config: Optional[SiteConfig] = None
    access_operations: dict = {}

    def get_site_config(self) -> SiteConfig:
        return self.site_config or get_site_config()

    def get_content_api(self) -> ContentAPI:
        return ContentAPI(self.get_site_config())

    def read_options(self) -> dict:
        params = self.request.query_params
        return {
            "draft": parse_bool(params.get("draft", "false"), "draft"),
            "depth": parse_int(params.get("depth", DEFAULT_DEPTH), "depth", maximum=MAX_DEPTH),
            "user": self.request.user,
            "override_access": False,
        }

    def request_values(self) -> dict:
        data = self.request.data
        if hasattr(data, "dict"):
            data = data.dict()
        if not isinstance(data, dict):
            raise ValidationError({"non_field_errors": ["Expected a JSON object."]})
        return dict(data)


class CollectionViewSet(EntityViewMixin, viewsets.ViewSet):
    """CRUD over one configured collection."""

    lookup_value_regex = r"\d+"
    access_operations = {
        "list": "read",
        "retrieve": "read",
        "create": "create",
        "partial_update": "update",
        "destroy": "delete",
    }

    @classmethod
    def for_collection(cls, entity: CollectionConfig, site_config: Optional[SiteConfig] = None):
        """Build the ViewSet class (with its OpenAPI annotations) for `entity`."""
        config = site_config or get_site_config()
        serializer_class = document_serializer(entity, config.auth_collection.slug)
        name = entity.display_name
        tags = [name]
        read_params = [DRAFT_PARAM, DEPTH_PARAM]

        viewset = type(
            f"{name}ViewSet",
            (cls,),
            {"entity_config": entity, "site_config": site_config, "__module__": __name__},
        )
        return extend_schema_view(
            list=extend_schema(
                tags=tags,
                operation_id=f"{entity.slug}_list",
                parameters=read_params + [PAGE_PARAM, LIMIT_PARAM, SORT_PARAM] + [
                    OpenApiParameter(name=f.name, location=OpenApiParameter.QUERY, required=False,
                                     description=f"Only documents whose `{f.name}` equals this value.")
                    for f in entity.fields
                ],
                responses={200: paginated(serializer_class, f"Paginated{name}List"), 403: ERROR_RESPONSE},
            ),
            retrieve=extend_schema(
                tags=tags,
                operation_id=f"{entity.slug}_retrieve",
                parameters=read_params,
                responses={200: serializer_class, 403: ERROR_RESPONSE, 404: ERROR_RESPONSE},
            ),
            create=extend_schema(
                tags=tags,
                operation_id=f"{entity.slug}_create",
                parameters=read_params,
                request=serializer_class,
                responses={201: serializer_class, 400: VALIDATION_ERROR_RESPONSE, 403: ERROR_RESPONSE},
            ),
            partial_update=extend_schema(
                tags=tags,
                operation_id=f"{entity.slug}_partial_update",
                parameters=read_params,
                request=serializer_class,
                responses={
                    200: serializer_class,
                    400: VALIDATION_ERROR_RESPONSE,
                    403: ERROR_RESPONSE,
                    404: ERROR_RESPONSE,
                },
            ),
            destroy=extend_schema(
                tags=tags,
                operation_id=f"{entity.slug}_destroy",
                responses={200: serializer_class, 403: ERROR_RESPONSE, 404: ERROR_RESPONSE},
            ),
        )(viewset)

    def list(self, request):
        params = request.query_params
        result = self.get_content_api().find(
            self.entity_config.slug,
            where=self.where_filters(),
            sort=params.get("sort") or None,
            page=parse_int(params.get("page", 1), "page", minimum=1),
            limit=parse_int(params.get("limit", DEFAULT_LIMIT), "limit", minimum=1),
            **self.read_options(),
        )
        return Response(result)

    def retrieve(self, request, pk=None):
        doc = self.get_content_api().find_by_id(self.entity_config.slug, pk, **self.read_options())
        return Response(doc)

    def create(self, request):
        doc = self.get_content_api().create(self.entity_config.slug, self.request_values(), **self.read_options())
        return Response(doc, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        doc = self.get_content_api().update(
            self.entity_config.slug, pk, self.request_values(), **self.read_options()
        )
        return Response(doc)

    def destroy(self, request, pk=None):
        doc = self.get_content_api().delete(
            self.entity_config.slug, pk, user=request.user, override_access=False
        )
        return Response(doc)

    def where_filters(self) -> dict:
        """`?<field>=<value>` params coerced to the field's stored type."""
        where = {}
        for key, raw in self.request.query_params.items():
            if key in RESERVED_QUERY_PARAMS:
                continue
            field = self.entity_config.get_field(key)
            if field is None or field.has_many:
                continue
            if field.type == NUMBER:
                try:
                    where[key] = float(raw)
                except ValueError:
                    raise ValidationError({key: ["Must be a number."]})
            elif field.type == CHECKBOX:
                where[key] = parse_bool(raw, key)
            elif field.type == RELATIONSHIP:
                where[key] = parse_int(raw, key)
            else:
                where[key] = raw
        return where


class GlobalViewSet(EntityViewMixin, viewsets.ViewSet):
    """Read and update one configured global (POST and PATCH both update)."""

    access_operations = {
        "retrieve": "read",
        "partial_update": "update",
    }

    @classmethod
    def for_global(cls, entity: GlobalConfig, site_config: Optional[SiteConfig] = None):
        config = site_config or get_site_config()
        serializer_class = document_serializer(entity, config.auth_collection.slug)
        name = entity.display_name
        viewset = type(
            f"{name}GlobalViewSet",
            (cls,),
            {"entity_config": entity, "site_config": site_config, "__module__": __name__},
        )
        return extend_schema_view(
            retrieve=extend_schema(
                tags=["Globals"],
                parameters=[DRAFT_PARAM, DEPTH_PARAM],
                responses={200: serializer_class, 403: ERROR_RESPONSE},
            ),
            partial_update=extend_schema(
                tags=["Globals"],
                parameters=[DRAFT_PARAM, DEPTH_PARAM],
                request=serializer_class,
                responses={200: serializer_class, 400: VALIDATION_ERROR_RESPONSE, 403: ERROR_RESPONSE},
            ),
        )(viewset)

    def retrieve(self, request):
        return Response(self.get_content_api().find_global(self.entity_config.slug, **self.read_options()))

    def partial_update(self, request):
        doc = self.get_content_api().update_global(
            self.entity_config.slug, self.request_values(), **self.read_options()
        )
        return Response(doc)


class VersionViewSet(EntityViewMixin, viewsets.ReadOnlyModelViewSet):
    """
    Stored versions of one collection or global.

    Filters (django-filter): `parent`, `status`, `latest`, `created_after`,
    `created_before`. Ordering: `?ordering=created_at|-created_at|id|-id`.
    """

    serializer_class = VersionSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = VersionFilter
    ordering_fields = ["created_at", "updated_at", "id"]
    ordering = ["-created_at", "-id"]
    lookup_value_regex = r"\d+"
    access_operations = {
        "list": "read_versions",
        "retrieve": "read_versions",
        "restore": "update",
    }

    @classmethod
    def for_entity(cls, entity, site_config: Optional[SiteConfig] = None):
        name = entity.display_name
        is_global = isinstance(entity, GlobalConfig)
        tags = ["Globals"] if is_global else [name]
        prefix = f"global_{entity.slug}" if is_global else entity.slug
        viewset = type(
            f"{name}VersionViewSet",
            (cls,),
            {"entity_config": entity, "site_config": site_config, "__module__": __name__},
        )
        return extend_schema_view(
            list=extend_schema(tags=tags, operation_id=f"{prefix}_versions_list"),
            retrieve=extend_schema(
                tags=tags,
                operation_id=f"{prefix}_versions_retrieve",
                responses={200: VersionSerializer, 403: ERROR_RESPONSE, 404: ERROR_RESPONSE},
            ),
            restore=extend_schema(
                tags=tags,
                operation_id=f"{prefix}_versions_restore",
                parameters=[DRAFT_PARAM, DEPTH_PARAM],
                request=None,
                responses={200: document_serializer(entity, (site_config or get_site_config()).auth_collection.slug),
                           403: ERROR_RESPONSE, 404: ERROR_RESPONSE},
            ),
        )(viewset)

    @property
    def is_global(self) -> bool:
        return isinstance(self.entity_config, GlobalConfig)

    def get_queryset(self):
        if self.is_global:
            return Version.objects.in_global(self.entity_config.slug)
        return Version.objects.in_collection(self.entity_config.slug)

    def get_access_id(self):
        """Id of the document a routed version belongs to (None for globals and listings)."""
        pk = self.kwargs.get("pk")
        if pk is None or self.is_global:
            return None
        return self.get_queryset().filter(pk=pk).values_list("document_id", flat=True).first()

    @action(detail=True, methods=["post"])
    def restore(self, request, pk=None):
        """Make this version the current state again (published unless `?draft=true`)."""
        api = self.get_content_api()
        options = self.read_options()
        if self.is_global:
            doc = api.restore_global_version(self.entity_config.slug, pk, **options)
        else:
            doc = api.restore_version(self.entity_config.slug, pk, **options)
        return Response(doc)
