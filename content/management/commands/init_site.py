"""
Run the site's `on_init` hook against the local content API.

What it does
------------
- Resolves the active `SiteConfig` (`settings.CONTENT_CONFIG`).
- Calls `config.on_init(ContentAPI(config))` inside one transaction: any
  failure (validation, missing document, access) rolls the whole run back and
  is reported as a command error.

Safety
------
- `--reset` hard-deletes every stored document, global and version, plus all
  non-superuser accounts, before running the hook. Local development only.

Usage
-----
    python manage.py init_site
    python manage.py init_site --reset
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError, CommandParser
from django.db import transaction
from rest_framework.exceptions import APIException

from content.api import ContentAPI
from content.models import Document, GlobalDocument, Version
from content.registry import get_site_config


class Command(BaseCommand):
    help = "Run the configured on_init hook (seed data). Use --reset to clear existing content first."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete all content and non-superuser accounts before running on_init.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        config = get_site_config()
        if config.on_init is None:
            raise CommandError("The active site config declares no on_init hook.")

        if options["reset"]:
            self._reset()

        try:
            config.on_init(ContentAPI(config))
        except APIException as exc:
            raise CommandError(f"on_init failed: {exc.detail}") from exc

        self.stdout.write(self.style.SUCCESS("on_init complete."))

    def _reset(self) -> None:
        Version.objects.all().delete()
        Document.objects.all().delete()
        GlobalDocument.objects.all().delete()
        get_user_model().objects.filter(is_superuser=False).delete()
        self.stdout.write(self.style.WARNING("Existing content and accounts deleted."))
