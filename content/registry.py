"""
Access to the active `SiteConfig`.

`settings.CONTENT_CONFIG` holds a dotted path to the site's `SiteConfig`
(default `community.config.config`). The object is imported once and cached;
the cache is dropped when the setting changes (e.g. `override_settings` in
tests).
"""

from __future__ import annotations

from functools import lru_cache

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.signals import setting_changed
from django.dispatch import receiver
from django.utils.module_loading import import_string

from .config import SiteConfig


@lru_cache(maxsize=None)
def get_site_config() -> SiteConfig:
    path = getattr(settings, "CONTENT_CONFIG", None)
    if not path:
        raise ImproperlyConfigured("CONTENT_CONFIG must point at a SiteConfig, e.g. 'community.config.config'.")
    try:
        config = import_string(path)
    except ImportError as exc:
        raise ImproperlyConfigured(f"CONTENT_CONFIG {path!r} could not be imported: {exc}") from exc
    if not isinstance(config, SiteConfig):
        raise ImproperlyConfigured(f"CONTENT_CONFIG {path!r} is not a SiteConfig (build it with build_config()).")
    return config


@receiver(setting_changed, dispatch_uid="content.registry.reset_site_config")
def reset_site_config(setting, **kwargs):
    if setting == "CONTENT_CONFIG":
        get_site_config.cache_clear()
