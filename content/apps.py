"""
AppConfig for the `content` app (collections, globals, drafts and versions).

Startup responsibilities
------------------------
- Import **registry** (required): its `setting_changed` receiver drops the
  cached `SiteConfig` when `CONTENT_CONFIG` is overridden.
- Import **schema** (optional): registers the drf-spectacular extension for
  relationship fields. In DEBUG import errors still surface.
"""

from __future__ import annotations

import logging
from importlib import import_module

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class ContentConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "content"

    def ready(self) -> None:  # pragma: no cover
        self._import_startup_module("content.registry", required=True)
        self._import_startup_module("content.schema", required=False)

    @staticmethod
    def _import_startup_module(dotted_path: str, *, required: bool) -> None:
        """
        Import a module at startup.

        Required modules (and every module in DEBUG) re-raise on failure;
        optional ones only log a warning in production.
        """
        try:
            import_module(dotted_path)
        except Exception:
            if required or settings.DEBUG:
                logger.exception("Failed to import startup module: %s", dotted_path)
                raise
            logger.warning("Optional startup module failed to import and was skipped: %s", dotted_path)
