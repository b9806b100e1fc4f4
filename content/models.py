"""
Storage for configured collections and globals.

Documents are stored schemalessly: each row keeps its field values in a JSON
`data` column keyed by field name, so adding a collection or a field to the
site config needs no migration. Field types are enforced by the generated
serializers in `content.serializers`, not by the database.

Draft model
-----------
- `Document` / `GlobalDocument` hold the **published** state. A document that
  was only ever saved as a draft keeps `status="draft"` here and is hidden from
  non-draft reads.
- `Version` rows snapshot every save of a versioned entity. The newest version
  per parent carries `latest=True`; draft reads resolve to it.
- A version belongs to exactly one parent: a document XOR a global
  (constraint + `clean()`).
"""

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from core.models import TimeStampedModel


class DocumentStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"


class DocumentQuerySet(models.QuerySet):
    def in_collection(self, slug: str):
        return self.filter(collection=slug)

    def published(self):
        """Rows visible to non-draft reads (published, or unversioned with no status)."""
        return self.exclude(status=DocumentStatus.DRAFT)


class Document(TimeStampedModel):
    """One document of a configured collection."""
    collection = models.SlugField(max_length=100)
    data = models.JSONField(default=dict, blank=True)
    status = models.CharField(
        max_length=16,
        choices=DocumentStatus.choices,
        blank=True,
        default="",
        help_text="Blank when the collection has no drafts.",
    )

    objects = DocumentQuerySet.as_manager()

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["collection", "status"], name="content_doc_coll_status_idx"),
            models.Index(fields=["collection", "-created_at"], name="content_doc_coll_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.collection} #{self.pk}"


class GlobalDocument(TimeStampedModel):
    """The single stored document of a configured global."""
    slug = models.SlugField(max_length=100, unique=True)
    data = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=16, choices=DocumentStatus.choices, blank=True, default="")

    class Meta:
        ordering = ("slug",)

    def __str__(self) -> str:
        return f"global {self.slug}"


class VersionQuerySet(models.QuerySet):
    def in_collection(self, slug: str):
        return self.filter(document__collection=slug)

    def in_global(self, slug: str):
        return self.filter(global_document__slug=slug)


class Version(TimeStampedModel):
    """
    Snapshot of a document or global at one save.

    `data` is the full field state after the save (not a diff).
    """
    document = models.ForeignKey(
        Document, on_delete=models.CASCADE, null=True, blank=True, related_name="versions"
    )
    global_document = models.ForeignKey(
        GlobalDocument, on_delete=models.CASCADE, null=True, blank=True, related_name="versions"
    )
    data = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=16, choices=DocumentStatus.choices, blank=True, default="")
    latest = models.BooleanField(default=False)

    objects = VersionQuerySet.as_manager()

    class Meta:
        ordering = ("-created_at", "-id")
        constraints = [
            models.CheckConstraint(
                name="version_xor_document_or_global",
                condition=(
                    (Q(document__isnull=False) & Q(global_document__isnull=True))
                    | (Q(document__isnull=True) & Q(global_document__isnull=False))
                ),
            ),
        ]
        indexes = [
            models.Index(fields=["document", "latest"], name="content_ver_doc_latest_idx"),
            models.Index(fields=["global_document", "latest"], name="content_ver_global_latest_idx"),
        ]

    def clean(self):
        super().clean()
        if bool(self.document_id) == bool(self.global_document_id):
            raise ValidationError("A version belongs to either a document or a global, not both or neither.")

    @property
    def parent_id(self):
        return self.document_id or self.global_document_id

    def __str__(self) -> str:
        parent = f"document {self.document_id}" if self.document_id else f"global {self.global_document_id}"
        return f"Version #{self.pk} of {parent} [{self.status or 'saved'}]"
