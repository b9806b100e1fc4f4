"""
Django admin for stored content.

Back-office only. Document data is edited as raw JSON here; field validation
from the site config applies to the content API, not to admin edits.
"""

from __future__ import annotations

from django.contrib import admin

from .models import Document, GlobalDocument, Version


class VersionInline(admin.TabularInline):
    model = Version
    fk_name = "document"
    extra = 0
    fields = ("id", "status", "latest", "created_at")
    readonly_fields = fields
    can_delete = False
    show_change_link = True


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ("id", "collection", "status", "created_at", "updated_at")
    list_filter = ("collection", "status")
    search_fields = ("id",)
    readonly_fields = ("created_at", "updated_at")
    inlines = [VersionInline]


@admin.register(GlobalDocument)
class GlobalDocumentAdmin(admin.ModelAdmin):
    list_display = ("slug", "status", "updated_at")
    list_filter = ("status",)
    readonly_fields = ("created_at", "updated_at")


@admin.register(Version)
class VersionAdmin(admin.ModelAdmin):
    """Versions are snapshots; they are browsed here, not edited."""
    list_display = ("id", "document", "global_document", "status", "latest", "created_at")
    list_filter = ("status", "latest", "document__collection", "global_document__slug")
    readonly_fields = ("document", "global_document", "data", "status", "latest", "created_at", "updated_at")
