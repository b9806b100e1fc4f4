"""
Content API errors.

These are DRF `APIException`s so one class serves both surfaces: the local
`ContentAPI` raises them to Python callers (e.g. `init_site`), and DRF views
render them as JSON with the right status code without extra mapping.

Validation failures use DRF's own `ValidationError`; access denials use DRF's
`PermissionDenied`.
"""

from rest_framework import status
from rest_framework.exceptions import APIException, NotFound


class UnknownEntity(NotFound):
    """A collection or global slug that the site config does not declare."""
    default_detail = "Unknown collection or global."
    default_code = "unknown_entity"


class DocumentNotFound(NotFound):
    default_detail = "Document not found."
    default_code = "document_not_found"


class VersionsNotEnabled(APIException):
    """Raised for version operations on an entity without `versions`."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Versions are not enabled for this entity."
    default_code = "versions_not_enabled"


class UnsupportedOperation(APIException):
    """Raised when the auth collection is asked for a document-only operation."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Operation not supported for this collection."
    default_code = "unsupported_operation"
