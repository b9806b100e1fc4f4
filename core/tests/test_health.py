"""Tests for the lightweight /health/ endpoint.

Contract
--------
- 200 when the DB connectivity check passes:
  {"app": "community-cms", "db": "ok", "time": "..."}.
- 503 when the DB check raises; payload includes {"db": "down", "error": "..."}.
"""

from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase


class HealthEndpointTests(TestCase):
    """Validate happy path and error path for /health/."""

    def test_health_ok(self):
        resp = self.client.get("/health/")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data.get("db"), "ok")
        self.assertIn("time", data)
        self.assertEqual(data.get("app"), "community-cms")

    def test_health_db_down(self):
        with patch("core.views.connection.ensure_connection", side_effect=DatabaseError("boom")):
            resp = self.client.get("/health/")
        self.assertEqual(resp.status_code, 503)
        data = resp.json()
        self.assertEqual(data.get("db"), "down")
        self.assertEqual(data.get("error"), "boom")
