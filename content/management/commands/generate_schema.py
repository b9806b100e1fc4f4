"""
Write the OpenAPI document for the content API to disk.

The target is the site's `SchemaConfig.output_file` (relative paths resolve
against `BASE_DIR`) unless `--file` is given. A `.json` suffix writes JSON;
anything else writes YAML.

Usage
-----
    python manage.py generate_schema
    python manage.py generate_schema --file /tmp/schema.json
"""

from __future__ import annotations

from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandParser
from drf_spectacular.generators import SchemaGenerator
from drf_spectacular.renderers import OpenApiJsonRenderer, OpenApiYamlRenderer

from content.registry import get_site_config


class Command(BaseCommand):
    help = "Generate the OpenAPI schema file for the configured collections and globals."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("--file", dest="file", default=None, help="Output path (overrides the site config).")

    def handle(self, *args, **options):
        if options["file"]:
            target = Path(options["file"])
        else:
            target = get_site_config().schema.resolve_path(settings.BASE_DIR)

        schema = SchemaGenerator().get_schema(request=None, public=True)
        renderer = OpenApiJsonRenderer() if target.suffix == ".json" else OpenApiYamlRenderer()
        output = renderer.render(schema, renderer_context={})

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(output)
        self.stdout.write(self.style.SUCCESS(f"Schema written to {target}"))
