from __future__ import annotations

import json
import tempfile
from io import StringIO
from pathlib import Path

from django.core.management import call_command
from django.test import TestCase


class GenerateSchemaCommandTests(TestCase):
    def generate(self, filename: str) -> Path:
        target = Path(self.tmpdir.name) / filename
        out = StringIO()
        call_command("generate_schema", "--file", str(target), stdout=out)
        self.assertIn(str(target), out.getvalue())
        return target

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def test_writes_yaml(self):
        target = self.generate("nested/schema.yml")
        text = target.read_text()
        self.assertTrue(text.startswith("openapi:"))
        self.assertIn("/api/posts/", text)
        self.assertIn("/api/globals/menu/", text)

    def test_writes_json(self):
        schema = json.loads(self.generate("schema.json").read_text())
        self.assertEqual(schema["info"]["title"], "Community CMS API")
        paths = schema["paths"]
        for path in ("/api/posts/", "/api/posts/versions/", "/api/globals/menu/",
                     "/api/globals/menu/versions/", "/api/users/", "/api/users/login/"):
            self.assertIn(path, paths)
        self.assertIn("Posts", schema["components"]["schemas"])
