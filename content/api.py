"""
Local content API: CRUD, drafts and versions over the configured site.

This is the single entry point for reading and writing content. HTTP views
call it with `override_access=False` and the request user; Python callers
(`init_site`, the site's `on_init` hook, tests) use the defaults, which skip
access rules.

    api = ContentAPI()
    post = api.create("posts", data={"text": "hello"})
    api.update("posts", post["id"], data={"text": "hello again"}, draft=True)
    api.find_by_id("posts", post["id"], draft=True)["text"]   # "hello again"
    api.find_by_id("posts", post["id"])["text"]               # "hello"

Drafts
------
- A save is a *draft save* when the entity has drafts enabled and the data
  carries `_status="draft"`, or carries no `_status` and `draft=True` is
  passed. Otherwise it publishes (`_status="published"`). `draft` is ignored
  for entities without drafts.
- Main rows (`Document`, `GlobalDocument`) hold the published state. A draft
  save of something already published only records a new latest version;
  the published state stays as it was.
- Draft reads resolve to the latest version; non-draft reads to the published
  row. A document that has never been published is invisible to non-draft
  reads (404 / excluded from `find`).
- Updates merge the submitted fields over the latest version (drafts) or the
  stored row, so publishing after a draft carries the draft changes along.

Results
-------
Documents come back as plain dicts: `id` (collections only), one key per
declared field, `_status` (drafts only), `created_at`, `updated_at`.
Relationship values are replaced by the related document down to `depth`
levels, reading with the same `draft` flag; targets that are missing or not
readable stay as raw ids.

Errors
------
DRF exceptions propagate: `ValidationError` (bad data), `DocumentNotFound` /
`UnknownEntity` (404), `PermissionDenied` (access rule said no),
`VersionsNotEnabled`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from django.core.paginator import Paginator
from django.db import transaction
from django.db.models import Prefetch
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from . import users as user_store
from .config import RELATIONSHIP, CollectionConfig, SiteConfig
from .exceptions import DocumentNotFound, UnsupportedOperation, VersionsNotEnabled
from .models import Document, DocumentStatus, GlobalDocument, Version
from .registry import get_site_config
from .serializers import document_serializer, version_state
from .versions import latest_version, save_version

logger = logging.getLogger("content.api")

DEFAULT_DEPTH = 2
MAX_DEPTH = 10
DEFAULT_LIMIT = 10


class ContentAPI:
    """Python-level data API for one `SiteConfig` (the active one by default)."""

    def __init__(self, config: Optional[SiteConfig] = None) -> None:
        self.config = config or get_site_config()
        self.logger = logger

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------
    def create(
        self,
        collection: str,
        data: Optional[dict] = None,
        *,
        draft: bool = False,
        depth: int = DEFAULT_DEPTH,
        user=None,
        override_access: bool = True,
    ) -> dict:
        entity = self.config.get_collection(collection)
        self._check_access(entity, "create", user, override_access)

        defaults = {f.name: f.default for f in entity.fields if f.default is not None}
        values = self._validate(entity, {**defaults, **(data or {})})

        if entity.auth:
            account = user_store.create_user(self._require(entity, values))
            logger.info("create collection=%s id=%s", entity.slug, account.pk)
            return user_store.user_payload(account)

        requested = values.pop("_status", None)
        is_draft = self._is_draft(entity, draft, requested)
        if not is_draft:
            self._require(entity, values)
        status = self._status_for(entity, is_draft)

        with transaction.atomic():
            doc = Document.objects.create(collection=entity.slug, data=values, status=status)
            if entity.versions:
                save_version(doc, values, status, max_per_doc=entity.versions.max_per_doc)

        logger.info("create collection=%s id=%s status=%s", entity.slug, doc.pk, status or "-")
        result = self._format(entity, doc, values, status, doc.updated_at)
        return self._populate(entity, result, depth=depth, draft=is_draft, user=user, override_access=override_access)

    def find_by_id(
        self,
        collection: str,
        id,
        *,
        draft: bool = False,
        depth: int = DEFAULT_DEPTH,
        user=None,
        override_access: bool = True,
    ) -> dict:
        entity = self.config.get_collection(collection)
        self._check_access(entity, "read", user, override_access, id=id)

        if entity.auth:
            return user_store.user_payload(user_store.get_user(id))

        doc = self._get_document(entity, id)
        resolved = self._resolve(entity, doc, draft)
        if resolved is None:
            raise DocumentNotFound(f"No published '{entity.slug}' document with id {id}.")
        result = self._format(entity, doc, *resolved)
        return self._populate(entity, result, depth=depth, draft=draft, user=user, override_access=override_access)

    def find(
        self,
        collection: str,
        *,
        where: Optional[dict] = None,
        draft: bool = False,
        sort: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_LIMIT,
        depth: int = DEFAULT_DEPTH,
        user=None,
        override_access: bool = True,
    ) -> dict:
        """
        Paginated listing with equality filters (`where={"field": value}`).

        Filters and sorting apply to the resolved (draft or published) state,
        before relationships are populated. `sort` is a field name, `-` for
        descending; default is newest first.
        """
        entity = self.config.get_collection(collection)
        self._check_access(entity, "read", user, override_access)

        if entity.auth:
            docs = user_store.list_users()
        else:
            rows = Document.objects.in_collection(entity.slug)
            if draft and entity.drafts_enabled:
                rows = rows.prefetch_related(
                    Prefetch("versions", queryset=Version.objects.filter(latest=True), to_attr="latest_versions")
                )
            else:
                rows = rows.published()
            docs = []
            for doc in rows:
                resolved = self._resolve(entity, doc, draft)
                if resolved is not None:
                    docs.append(self._format(entity, doc, *resolved))

        docs = [d for d in docs if _matches(d, where)]
        if sort:
            docs = _sorted(docs, sort)

        result = _paginate(docs, page=page, limit=limit)
        result["docs"] = [
            self._populate(entity, d, depth=depth, draft=draft, user=user, override_access=override_access)
            for d in result["docs"]
        ]
        return result

    def update(
        self,
        collection: str,
        id,
        data: Optional[dict] = None,
        *,
        draft: bool = False,
        depth: int = DEFAULT_DEPTH,
        user=None,
        override_access: bool = True,
    ) -> dict:
        entity = self.config.get_collection(collection)
        self._check_access(entity, "update", user, override_access, id=id)
        values = self._validate(entity, data or {})

        if entity.auth:
            account = user_store.update_user(user_store.get_user(id), values)
            logger.info("update collection=%s id=%s", entity.slug, account.pk)
            return user_store.user_payload(account)

        with transaction.atomic():
            doc = self._get_document(entity, id, for_update=True)
            result = self._save(entity, doc, values, draft=draft, has_published=doc.status != DocumentStatus.DRAFT)

        logger.info(
            "update collection=%s id=%s status=%s", entity.slug, doc.pk, result.get("_status") or "-"
        )
        return self._populate(
            entity, result, depth=depth, draft=result.get("_status") == DocumentStatus.DRAFT,
            user=user, override_access=override_access,
        )

    def delete(self, collection: str, id, *, user=None, override_access: bool = True) -> dict:
        """Delete a document (and its versions); returns its last draft-aware state."""
        entity = self.config.get_collection(collection)
        self._check_access(entity, "delete", user, override_access, id=id)

        if entity.auth:
            account = user_store.get_user(id)
            result = user_store.user_payload(account)
            account.delete()
        else:
            doc = self._get_document(entity, id)
            resolved = self._resolve(entity, doc, draft=True) or (doc.data, doc.status, doc.updated_at)
            result = self._format(entity, doc, *resolved)
            doc.delete()

        logger.info("delete collection=%s id=%s", entity.slug, id)
        return result

    # ------------------------------------------------------------------
    # Globals
    # ------------------------------------------------------------------
    def find_global(
        self,
        slug: str,
        *,
        draft: bool = False,
        depth: int = DEFAULT_DEPTH,
        user=None,
        override_access: bool = True,
    ) -> dict:
        """A global always exists; before its first publish every field reads as None."""
        entity = self.config.get_global(slug)
        self._check_access(entity, "read", user, override_access)

        row = GlobalDocument.objects.filter(slug=entity.slug).first()
        resolved = self._resolve(entity, row, draft) if row is not None else None
        if resolved is None:
            result = self._format(entity, None, {}, None, None)
        else:
            result = self._format(entity, row, *resolved)
        return self._populate(entity, result, depth=depth, draft=draft, user=user, override_access=override_access)

    def update_global(
        self,
        slug: str,
        data: Optional[dict] = None,
        *,
        draft: bool = False,
        depth: int = DEFAULT_DEPTH,
        user=None,
        override_access: bool = True,
    ) -> dict:
        entity = self.config.get_global(slug)
        self._check_access(entity, "update", user, override_access)
        values = self._validate(entity, data or {})

        with transaction.atomic():
            row, created = GlobalDocument.objects.select_for_update().get_or_create(slug=entity.slug)
            has_published = not created and row.status != DocumentStatus.DRAFT
            result = self._save(entity, row, values, draft=draft, has_published=has_published)

        logger.info("update_global slug=%s status=%s", entity.slug, result.get("_status") or "-")
        return self._populate(
            entity, result, depth=depth, draft=result.get("_status") == DocumentStatus.DRAFT,
            user=user, override_access=override_access,
        )

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------
    def find_versions(
        self,
        collection: str,
        *,
        parent=None,
        status: Optional[str] = None,
        latest: Optional[bool] = None,
        page: int = 1,
        limit: int = DEFAULT_LIMIT,
        user=None,
        override_access: bool = True,
    ) -> dict:
        entity = self.config.get_collection(collection)
        self._require_versions(entity)
        self._check_access(entity, "read_versions", user, override_access, id=parent)
        qs = Version.objects.in_collection(entity.slug)
        if parent is not None:
            qs = qs.filter(document_id=parent)
        return self._version_page(qs, status=status, latest=latest, page=page, limit=limit)

    def find_global_versions(
        self,
        slug: str,
        *,
        status: Optional[str] = None,
        latest: Optional[bool] = None,
        page: int = 1,
        limit: int = DEFAULT_LIMIT,
        user=None,
        override_access: bool = True,
    ) -> dict:
        entity = self.config.get_global(slug)
        self._require_versions(entity)
        self._check_access(entity, "read_versions", user, override_access)
        qs = Version.objects.in_global(entity.slug)
        return self._version_page(qs, status=status, latest=latest, page=page, limit=limit)

    def restore_version(
        self,
        collection: str,
        version_id,
        *,
        draft: bool = False,
        depth: int = DEFAULT_DEPTH,
        user=None,
        override_access: bool = True,
    ) -> dict:
        """Save a stored version's state as the document's new state (published unless `draft`)."""
        entity = self.config.get_collection(collection)
        self._require_versions(entity)
        version = self._get_version(Version.objects.in_collection(entity.slug), version_id)
        self._check_access(entity, "update", user, override_access, id=version.document_id)

        logger.info("restore collection=%s id=%s version=%s", entity.slug, version.document_id, version.pk)
        return self.update(
            entity.slug, version.document_id, dict(version.data),
            draft=draft, depth=depth, user=user, override_access=override_access,
        )

    def restore_global_version(
        self,
        slug: str,
        version_id,
        *,
        draft: bool = False,
        depth: int = DEFAULT_DEPTH,
        user=None,
        override_access: bool = True,
    ) -> dict:
        entity = self.config.get_global(slug)
        self._require_versions(entity)
        version = self._get_version(Version.objects.in_global(entity.slug), version_id)
        self._check_access(entity, "update", user, override_access)

        logger.info("restore global=%s version=%s", entity.slug, version.pk)
        return self.update_global(
            entity.slug, dict(version.data),
            draft=draft, depth=depth, user=user, override_access=override_access,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _check_access(self, entity, operation: str, user, override_access: bool, id=None) -> None:
        if override_access:
            return
        if not entity.access.allows(operation, user=user, id=id):
            raise PermissionDenied(f"You are not allowed to {operation.replace('_', ' ')} '{entity.slug}'.")

    def _validate(self, entity, data: dict) -> dict:
        serializer_class = document_serializer(entity, self.config.auth_collection.slug)
        serializer = serializer_class(data=data, partial=True)
        serializer.is_valid(raise_exception=True)
        return dict(serializer.validated_data)

    @staticmethod
    def _require(entity, values: dict) -> dict:
        missing = {
            f.name: ["This field is required."]
            for f in entity.fields
            if f.required and values.get(f.name) in (None, "", [])
        }
        if missing:
            raise ValidationError(missing)
        return values

    @staticmethod
    def _is_draft(entity, draft: bool, requested: Optional[str]) -> bool:
        if not entity.drafts_enabled:
            return False
        if requested:
            return requested == DocumentStatus.DRAFT
        return draft

    @staticmethod
    def _status_for(entity, is_draft: bool) -> str:
        if not entity.drafts_enabled:
            return ""
        return DocumentStatus.DRAFT if is_draft else DocumentStatus.PUBLISHED

    def _save(self, entity, row, values: dict, *, draft: bool, has_published: bool) -> dict:
        """Merge `values` into `row`'s current state and persist it as a draft or a publish."""
        requested = values.pop("_status", None)
        is_draft = self._is_draft(entity, draft, requested)
        merged = {**self._current_values(entity, row), **values}
        if not is_draft:
            self._require(entity, merged)
        status = self._status_for(entity, is_draft)
        max_per_doc = entity.versions.max_per_doc if entity.versions else 0

        if is_draft and has_published:
            version = save_version(row, merged, status, max_per_doc=max_per_doc)
            return self._format(entity, row, merged, status, version.updated_at)

        row.data = merged
        row.status = status
        row.save()
        if entity.versions:
            save_version(row, merged, status, max_per_doc=max_per_doc)
        return self._format(entity, row, merged, status, row.updated_at)

    def _current_values(self, entity, row) -> dict:
        if entity.drafts_enabled:
            latest = latest_version(row)
            if latest is not None:
                return dict(latest.data)
        return dict(row.data or {})

    def _resolve(self, entity, row, draft: bool):
        """
        (values, status, updated_at) visible to a draft / non-draft read, or
        None when a non-draft read has nothing published to show.
        """
        if draft and entity.drafts_enabled:
            latest = latest_version(row)
            if latest is not None:
                return dict(latest.data), latest.status, latest.updated_at
            return dict(row.data), row.status, row.updated_at
        if row.status == DocumentStatus.DRAFT:
            return None
        return dict(row.data), row.status, row.updated_at

    @staticmethod
    def _get_document(entity: CollectionConfig, id, *, for_update: bool = False) -> Document:
        qs = Document.objects.in_collection(entity.slug)
        if for_update:
            qs = qs.select_for_update()
        try:
            return qs.get(pk=id)
        except (Document.DoesNotExist, ValueError, TypeError):
            raise DocumentNotFound(f"No '{entity.slug}' document with id {id}.")

    @staticmethod
    def _get_version(qs, version_id) -> Version:
        try:
            return qs.get(pk=version_id)
        except (Version.DoesNotExist, ValueError, TypeError):
            raise DocumentNotFound(f"No version with id {version_id}.")

    @staticmethod
    def _require_versions(entity) -> None:
        if getattr(entity, "auth", False):
            raise UnsupportedOperation("The auth collection does not keep versions.")
        if not entity.versions:
            raise VersionsNotEnabled(f"Versions are not enabled for '{entity.slug}'.")

    @staticmethod
    def _format(entity, row, values: dict, status, updated_at) -> dict:
        doc: dict[str, Any] = {}
        if isinstance(entity, CollectionConfig):
            doc["id"] = row.pk
        for f in entity.fields:
            doc[f.name] = values.get(f.name)
        if entity.drafts_enabled:
            doc["_status"] = status or None
        doc["created_at"] = row.created_at if row is not None else None
        doc["updated_at"] = updated_at
        return doc

    def _populate(self, entity, doc: dict, *, depth: int, draft: bool, user, override_access: bool) -> dict:
        depth = max(0, min(int(depth), MAX_DEPTH))
        if depth == 0:
            return doc
        options = {"depth": depth - 1, "draft": draft, "user": user, "override_access": override_access}
        for f in entity.fields:
            value = doc.get(f.name)
            if f.type != RELATIONSHIP or value is None:
                continue
            if f.has_many:
                doc[f.name] = [self._related(f.relation_to, pk, **options) for pk in value]
            else:
                doc[f.name] = self._related(f.relation_to, value, **options)
        return doc

    def _related(self, collection: str, pk, **kwargs):
        try:
            return self.find_by_id(collection, pk, **kwargs)
        except (NotFound, PermissionDenied):
            return pk

    @staticmethod
    def _version_page(qs, *, status, latest, page, limit) -> dict:
        if status:
            qs = qs.filter(status=status)
        if latest is not None:
            qs = qs.filter(latest=latest)
        result = _paginate(list(qs), page=page, limit=limit)
        result["docs"] = [_format_version(v) for v in result["docs"]]
        return result


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
def _format_version(version: Version) -> dict:
    return {
        "id": version.pk,
        "parent": version.parent_id,
        "version": version_state(version),
        "latest": version.latest,
        "created_at": version.created_at,
        "updated_at": version.updated_at,
    }


def _matches(doc: dict, where: Optional[dict]) -> bool:
    if not where:
        return True
    return all(doc.get(key) == value for key, value in where.items())


def _sorted(docs: list[dict], sort: str) -> list[dict]:
    key = sort.lstrip("-")
    # None sorts last ascending, first descending.
    return sorted(docs, key=lambda d: (d.get(key) is None, d.get(key)), reverse=sort.startswith("-"))


def _paginate(items: list, *, page: int, limit: int) -> dict:
    limit = max(1, int(limit))
    page = max(1, int(page))
    paginator = Paginator(items, limit)
    docs = list(paginator.page(page).object_list) if page <= paginator.num_pages else []
    return {
        "docs": docs,
        "total_docs": paginator.count,
        "limit": limit,
        "page": page,
        "total_pages": paginator.num_pages,
        "has_prev_page": page > 1,
        "has_next_page": page < paginator.num_pages,
    }
