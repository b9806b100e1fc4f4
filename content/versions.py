"""
Version bookkeeping for documents and globals.

Every helper works for either parent row type (`Document` or
`GlobalDocument`; both expose their history as `row.versions`) and must run
inside the caller's transaction: switching the `latest` flag, inserting the
new snapshot and pruning happen together.
"""

from __future__ import annotations

from typing import Optional

from .models import Version


def latest_version(row) -> Optional[Version]:
    """The newest version of `row`, or None when nothing was recorded yet."""
    if row.pk is None:
        return None
    prefetched = getattr(row, "latest_versions", None)
    if prefetched is not None:
        return prefetched[0] if prefetched else None
    return row.versions.filter(latest=True).first()


def save_version(row, data: dict, status: str, *, max_per_doc: int = 0) -> Version:
    """
    Record `data` as the newest version of `row`.

    Exactly one version per parent keeps `latest=True`. With `max_per_doc > 0`
    the oldest versions beyond the cap are deleted.
    """
    row.versions.filter(latest=True).update(latest=False)
    version = row.versions.create(data=data, status=status, latest=True)
    if max_per_doc > 0:
        prune_versions(row, keep=max_per_doc)
    return version


def prune_versions(row, *, keep: int) -> int:
    """Delete all but the `keep` newest versions of `row`; returns the number removed."""
    stale = list(row.versions.order_by("-created_at", "-id").values_list("pk", flat=True)[keep:])
    if not stale:
        return 0
    deleted, _ = Version.objects.filter(pk__in=stale).delete()
    return deleted
