"""django-filter FilterSets for version listings."""

from __future__ import annotations

import django_filters
from django.db.models import Q

from .models import DocumentStatus, Version


class VersionFilter(django_filters.FilterSet):
    """
    Query params for `/api/<collection>/versions/` and `/api/globals/<slug>/versions/`:

      - parent: document (or global row) id
      - status: draft|published
      - latest: true|false
      - created_after / created_before: ISO8601 datetimes (inclusive)
    """
    parent = django_filters.NumberFilter(method="filter_parent")
    status = django_filters.ChoiceFilter(choices=DocumentStatus.choices)
    latest = django_filters.BooleanFilter()
    created_after = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_before = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = Version
        fields = ["parent", "status", "latest", "created_after", "created_before"]

    def filter_parent(self, queryset, name, value):
        return queryset.filter(Q(document_id=value) | Q(global_document_id=value))
