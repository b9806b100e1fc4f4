"""
Permission classes used across the API.

This module exposes:
- `EntityAccessPermission`: evaluates the access callables declared on a
  collection or global config (`content.config.Access`) for the current view
  action.

Usage
-----
- Views set `entity_config` (a `CollectionConfig` or `GlobalConfig`) and map
  their actions onto access operations through `access_operations`:
      permission_classes = [EntityAccessPermission]
      access_operations = {"list": "read", "create": "create", ...}

Security
--------
# SECURITY: This gates the HTTP surface only. The content API re-evaluates the
# same callables (with the document id) and during relationship population, so
# nested documents never bypass their own read rule.
"""

from rest_framework.permissions import BasePermission


class EntityAccessPermission(BasePermission):
    """
    Object-agnostic gate driven by the entity's declared access rules.

    Notes:
        - Actions missing from `view.access_operations` are denied.
        - The document id is passed through as `id`: the routed lookup value,
          or whatever `view.get_access_id()` returns when the view defines it.
    """

    def has_permission(self, request, view) -> bool:
        operation = getattr(view, "access_operations", {}).get(getattr(view, "action", None))
        config = getattr(view, "entity_config", None)
        if operation is None or config is None:
            return False
        get_access_id = getattr(view, "get_access_id", None)
        if get_access_id is not None:
            doc_id = get_access_id()
        else:
            doc_id = view.kwargs.get(getattr(view, "lookup_url_kwarg", None) or "pk")
        return config.access.allows(operation, user=request.user, id=doc_id)
