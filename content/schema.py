"""
drf-spectacular helpers for the content API schema.

Purpose
-------
Shared OpenAPI components for the generated collection/global endpoints:
- query parameters common to document reads (`draft`, `depth`) and listings
  (`page`, `limit`, `sort`),
- reusable error envelopes,
- a field extension documenting `RelationshipField` as "id or populated
  document".

Notes
-----
- Imported at startup by `content.apps.ContentConfig.ready()` so the field
  extension is registered before any schema generation.
- `manage.py generate_schema` writes the resulting document to the site's
  `SchemaConfig.output_file`.
"""

from __future__ import annotations

from drf_spectacular.extensions import OpenApiSerializerFieldExtension
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, inline_serializer
from rest_framework import serializers

DRAFT_PARAM = OpenApiParameter(
    name="draft",
    type=OpenApiTypes.BOOL,
    location=OpenApiParameter.QUERY,
    required=False,
    description=(
        "Reads: return the latest draft instead of the published document. "
        "Writes: save as a draft without touching the published document."
    ),
)

DEPTH_PARAM = OpenApiParameter(
    name="depth",
    type=OpenApiTypes.INT,
    location=OpenApiParameter.QUERY,
    required=False,
    description="How many levels of relationships to populate (default 2, max 10).",
)

PAGE_PARAM = OpenApiParameter(
    name="page", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False,
)

LIMIT_PARAM = OpenApiParameter(
    name="limit", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False,
    description="Documents per page (default 10).",
)

SORT_PARAM = OpenApiParameter(
    name="sort", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
    description="Field name to sort by; prefix with `-` for descending.",
)

ERROR_RESPONSE = OpenApiResponse(
    response=inline_serializer(
        name="Error",
        fields={
            "detail": serializers.CharField(),
        },
    ),
    description="Error response",
)

VALIDATION_ERROR_RESPONSE = OpenApiResponse(
    response=inline_serializer(
        name="ValidationError",
        fields={
            "errors": serializers.DictField(
                child=serializers.ListField(child=serializers.CharField()),
                required=False,
            ),
        },
    ),
    description="Field errors keyed by field name",
)


def paginated(serializer_class, name: str):
    """Inline component for a `ContentAPI.find()` page of `serializer_class` documents."""
    return inline_serializer(
        name=name,
        fields={
            "docs": serializer_class(many=True),
            "total_docs": serializers.IntegerField(),
            "limit": serializers.IntegerField(),
            "page": serializers.IntegerField(),
            "total_pages": serializers.IntegerField(),
            "has_prev_page": serializers.BooleanField(),
            "has_next_page": serializers.BooleanField(),
        },
    )


class RelationshipFieldExtension(OpenApiSerializerFieldExtension):
    """
    OpenAPI mapping for content.serializers.RelationshipField.

    Writes take an id; reads return the populated document when `depth` allows
    and the target is readable, the bare id otherwise.
    """
    target_class = "content.serializers.RelationshipField"

    def map_serializer_field(self, auto_schema, direction):
        schema = {
            "oneOf": [
                {"type": "integer"},
                {"type": "object", "additionalProperties": True},
            ],
            "description": f"Id of a '{self.target.relation_to}' document, or the populated document.",
        }
        if direction == "request":
            schema = {"type": "integer", "description": schema["description"]}
        if self.target.allow_null:
            schema["nullable"] = True
        return schema
