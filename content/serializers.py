"""
DRF serializers generated from the site config.

`document_serializer(entity, auth_slug)` turns a `CollectionConfig` /
`GlobalConfig` into a `serializers.Serializer` subclass. The same class is used
for two jobs:
- input validation for every content API write (local and HTTP): unknown keys
  are dropped, values are type-checked, relationship ids must exist;
- request/response components in the generated OpenAPI schema.

Field mapping
-------------
    text / textarea -> CharField          checkbox     -> BooleanField
    number          -> FloatField         email        -> EmailField
    relationship    -> RelationshipField  (ListField of them when `has_many`)

Drafts-enabled entities also accept `_status` (`draft` | `published`). Auth
collections get a write-only `password`.

Required-ness is enforced by the content API on published saves (drafts may be
incomplete), so generated fields only carry `required` for documentation.
"""

from __future__ import annotations

from functools import lru_cache

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .config import (
    CHECKBOX,
    EMAIL,
    NUMBER,
    RELATIONSHIP,
    TEXT,
    TEXTAREA,
    Field,
)
from .models import Document, DocumentStatus, Version


class RelationshipField(serializers.Field):
    """
    Id of a document in `relation_to`.

    Accepts a bare id or an already-populated document (`{"id": ...}`) so a
    document read with `depth > 0` can be written back unchanged.
    """

    default_error_messages = {
        "invalid": "Expected a document id.",
        "does_not_exist": "No '{relation_to}' document with id {pk}.",
    }

    def __init__(self, relation_to: str, auth: bool = False, **kwargs):
        self.relation_to = relation_to
        self.auth = auth
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, dict):
            data = data.get("id")
        if isinstance(data, bool) or (isinstance(data, float) and not data.is_integer()):
            self.fail("invalid")
        try:
            pk = int(data)
        except (TypeError, ValueError, OverflowError):
            self.fail("invalid")
        if not self._exists(pk):
            self.fail("does_not_exist", relation_to=self.relation_to, pk=pk)
        return pk

    def to_representation(self, value):
        return value

    def _exists(self, pk: int) -> bool:
        if self.auth:
            return get_user_model().objects.filter(pk=pk).exists()
        return Document.objects.in_collection(self.relation_to).filter(pk=pk).exists()


def build_field(f: Field, auth_slug: str) -> serializers.Field:
    common = {
        "required": f.required,
        "allow_null": not f.required,
        "label": f.label,
    }
    if f.type in (TEXT, TEXTAREA):
        return serializers.CharField(allow_blank=not f.required, trim_whitespace=f.type == TEXT, **common)
    if f.type == NUMBER:
        return serializers.FloatField(**common)
    if f.type == CHECKBOX:
        return serializers.BooleanField(**common)
    if f.type == EMAIL:
        return serializers.EmailField(**common)
    if f.type == RELATIONSHIP:
        auth = f.relation_to == auth_slug
        if f.has_many:
            return serializers.ListField(
                child=RelationshipField(relation_to=f.relation_to, auth=auth),
                **common,
            )
        return RelationshipField(relation_to=f.relation_to, auth=auth, **common)
    raise ValueError(f"Unsupported field type: {f.type!r}")


@lru_cache(maxsize=None)
def document_serializer(entity, auth_slug: str) -> type[serializers.Serializer]:
    """Build (once per entity) the serializer class for a collection or global."""
    attrs: dict = {"__module__": __name__}
    if entity.kind == "collection":
        attrs["id"] = serializers.IntegerField(read_only=True)
    for f in entity.fields:
        attrs[f.name] = build_field(f, auth_slug)
    if getattr(entity, "auth", False):
        attrs["password"] = serializers.CharField(
            write_only=True, required=True, trim_whitespace=False, style={"input_type": "password"}
        )
    if entity.drafts_enabled:
        attrs["_status"] = serializers.ChoiceField(choices=DocumentStatus.choices, required=False)
    attrs["created_at"] = serializers.DateTimeField(read_only=True, allow_null=True)
    attrs["updated_at"] = serializers.DateTimeField(read_only=True, allow_null=True)
    return type(f"{entity.display_name}Serializer", (serializers.Serializer,), attrs)


class VersionSerializer(serializers.ModelSerializer):
    """A stored version: `version` is the full document state at that save."""
    parent = serializers.IntegerField(source="parent_id", read_only=True)
    version = serializers.SerializerMethodField()

    class Meta:
        model = Version
        fields = ["id", "parent", "version", "latest", "created_at", "updated_at"]
        read_only_fields = fields

    def get_version(self, obj: Version) -> dict:
        return version_state(obj)


def version_state(version: Version) -> dict:
    state = dict(version.data)
    if version.status:
        state["_status"] = version.status
    return state
