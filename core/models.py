"""
Shared abstract models.

`TimeStampedModel` gives every stored content row the audit timestamps the
content API exposes as `created_at` / `updated_at`.
"""

from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base adding `created_at` / `updated_at` audit timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ("-created_at",)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={getattr(self, 'id', None)}>"
