"""
Declarative site configuration: collections, globals and their fields.

A site is described once, as data, and handed to the content layer through
`settings.CONTENT_CONFIG` (a dotted path to a `SiteConfig`):

    config = build_config(
        collections=[posts_collection],
        globals=[menu_global],
        schema=SchemaConfig(output_file="community/schema.yml"),
        on_init=on_init,
    )

Defaults & sanitizing
---------------------
`build_config()` adds the `users` auth collection when none is declared and
rejects inconsistent configs with `ImproperlyConfigured`:
- duplicate collection slugs, duplicate global slugs, a collection named `globals`,
- duplicate or reserved field names (`id`, `_status`, `created_at`, `updated_at`),
- unknown field types,
- relationship fields without a target, or targeting an undeclared collection.

All config objects are frozen dataclasses; build a new config instead of
mutating one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, ClassVar, Optional, Sequence

from django.core.exceptions import ImproperlyConfigured

from .access import authenticated
from .exceptions import UnknownEntity

AccessRule = Callable[..., bool]

TEXT = "text"
TEXTAREA = "textarea"
NUMBER = "number"
CHECKBOX = "checkbox"
EMAIL = "email"
RELATIONSHIP = "relationship"

FIELD_TYPES = frozenset({TEXT, TEXTAREA, NUMBER, CHECKBOX, EMAIL, RELATIONSHIP})

# Keys every formatted document carries besides its declared fields.
RESERVED_FIELD_NAMES = frozenset({"id", "_status", "created_at", "updated_at"})

ACCESS_OPERATIONS = ("read", "create", "update", "delete", "read_versions")

USERS_SLUG = "users"

_SLUG_RE = re.compile(r"^[a-z][a-z0-9_-]*$")


@dataclass(frozen=True)
class Field:
    """One named, typed value on a document."""
    name: str
    type: str
    relation_to: Optional[str] = None
    has_many: bool = False
    required: bool = False
    default: Any = None
    label: Optional[str] = None


@dataclass(frozen=True)
class Versions:
    """
    Version history settings.

    `drafts` enables draft saves; `max_per_doc` caps stored versions per
    document (0 keeps everything).
    """
    drafts: bool = False
    max_per_doc: int = 100


@dataclass(frozen=True)
class Access:
    """Per-operation access rules; every operation defaults to `authenticated`."""
    read: AccessRule = authenticated
    create: AccessRule = authenticated
    update: AccessRule = authenticated
    delete: AccessRule = authenticated
    read_versions: AccessRule = authenticated

    def allows(self, operation: str, **context) -> bool:
        if operation not in ACCESS_OPERATIONS:
            raise ValueError(f"Unknown access operation: {operation!r}")
        return bool(getattr(self, operation)(**context))


@dataclass(frozen=True, eq=False)
class _EntityConfig:
    slug: str
    fields: Sequence[Field] = ()
    versions: Optional[Versions] = None
    access: Access = field(default_factory=Access)
    label: Optional[str] = None

    kind: ClassVar[str] = "entity"

    def __post_init__(self):
        # eq=False: configs hash by identity, whatever their field defaults hold.
        object.__setattr__(self, "fields", tuple(self.fields))

    @property
    def drafts_enabled(self) -> bool:
        return bool(self.versions and self.versions.drafts)

    @property
    def display_name(self) -> str:
        """CamelCase name used for generated serializer/schema components."""
        if self.label:
            return self.label
        return "".join(part.capitalize() for part in re.split(r"[-_]", self.slug))

    def get_field(self, name: str) -> Optional[Field]:
        return next((f for f in self.fields if f.name == name), None)


@dataclass(frozen=True, eq=False)
class CollectionConfig(_EntityConfig):
    """A content type with many documents. `auth=True` marks the user collection."""
    auth: bool = False

    kind: ClassVar[str] = "collection"


@dataclass(frozen=True, eq=False)
class GlobalConfig(_EntityConfig):
    """A singleton content type: exactly one document per slug."""

    kind: ClassVar[str] = "global"


@dataclass(frozen=True)
class SchemaConfig:
    """Where `manage.py generate_schema` writes the API schema artifact."""
    output_file: str = "schema.yml"

    def resolve_path(self, base_dir) -> Path:
        path = Path(self.output_file)
        return path if path.is_absolute() else Path(base_dir) / path


@dataclass(frozen=True)
class SiteConfig:
    """Root configuration object; produced by `build_config()`."""
    collections: tuple[CollectionConfig, ...]
    globals: tuple[GlobalConfig, ...]
    schema: SchemaConfig
    on_init: Optional[Callable[..., Any]] = None

    def get_collection(self, slug: str) -> CollectionConfig:
        for collection in self.collections:
            if collection.slug == slug:
                return collection
        raise UnknownEntity(f"Collection '{slug}' is not configured.")

    def get_global(self, slug: str) -> GlobalConfig:
        for global_config in self.globals:
            if global_config.slug == slug:
                return global_config
        raise UnknownEntity(f"Global '{slug}' is not configured.")

    @property
    def auth_collection(self) -> CollectionConfig:
        return next(c for c in self.collections if c.auth)


def default_users_collection() -> CollectionConfig:
    return CollectionConfig(
        slug=USERS_SLUG,
        auth=True,
        label="User",
        fields=(Field(name="email", type=EMAIL, required=True),),
    )


def build_config(
    *,
    collections: Sequence[CollectionConfig] = (),
    globals: Sequence[GlobalConfig] = (),
    schema: Optional[SchemaConfig] = None,
    on_init: Optional[Callable[..., Any]] = None,
) -> SiteConfig:
    """Apply defaults to a site declaration and validate it."""
    collections = tuple(collections)
    if not any(c.auth for c in collections):
        collections = (default_users_collection(),) + collections

    config = SiteConfig(
        collections=collections,
        globals=tuple(globals),
        schema=schema or SchemaConfig(),
        on_init=on_init,
    )
    _sanitize(config)
    return config


# ---------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------
def _sanitize(config: SiteConfig) -> None:
    auth_collections = [c.slug for c in config.collections if c.auth]
    if len(auth_collections) > 1:
        raise ImproperlyConfigured(
            f"Only one auth collection is supported, got: {', '.join(auth_collections)}."
        )

    _check_unique_slugs(config.collections, "collection")
    _check_unique_slugs(config.globals, "global")

    collection_slugs = {c.slug for c in config.collections}
    if "globals" in collection_slugs:
        raise ImproperlyConfigured("'globals' is reserved for global routes and cannot be a collection slug.")
    for entity in (*config.collections, *config.globals):
        _check_fields(entity, collection_slugs)


def _check_unique_slugs(entities, kind: str) -> None:
    seen = set()
    for entity in entities:
        if not _SLUG_RE.match(entity.slug or ""):
            raise ImproperlyConfigured(f"Invalid {kind} slug: {entity.slug!r}.")
        if entity.slug in seen:
            raise ImproperlyConfigured(f"Duplicate {kind} slug: {entity.slug!r}.")
        seen.add(entity.slug)


def _check_fields(entity: _EntityConfig, collection_slugs: set[str]) -> None:
    names = set()
    for f in entity.fields:
        where = f"{entity.kind} '{entity.slug}', field '{f.name}'"
        if f.name in RESERVED_FIELD_NAMES:
            raise ImproperlyConfigured(f"{where}: the name is reserved.")
        if f.name in names:
            raise ImproperlyConfigured(f"{where}: duplicate field name.")
        names.add(f.name)

        if f.type not in FIELD_TYPES:
            raise ImproperlyConfigured(f"{where}: unknown field type {f.type!r}.")
        if f.type == RELATIONSHIP:
            if not f.relation_to:
                raise ImproperlyConfigured(f"{where}: relationship fields need `relation_to`.")
            if f.relation_to not in collection_slugs:
                raise ImproperlyConfigured(
                    f"{where}: relation_to {f.relation_to!r} is not a configured collection."
                )
        elif f.has_many:
            raise ImproperlyConfigured(f"{where}: `has_many` only applies to relationship fields.")
