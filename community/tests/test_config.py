from __future__ import annotations

from django.test import SimpleTestCase

from community.config import config, on_init
from community.collections.posts import posts_collection
from community.globals.menu import menu_global
from content.config import RELATIONSHIP, TEXT
from content.registry import get_site_config


class CommunityConfigTests(SimpleTestCase):
    def test_is_the_active_site_config(self):
        self.assertIs(get_site_config(), config)

    def test_declares_posts_menu_and_users(self):
        self.assertEqual([c.slug for c in config.collections], ["users", "posts"])
        self.assertEqual([g.slug for g in config.globals], ["menu"])
        self.assertIs(config.on_init, on_init)
        self.assertEqual(config.schema.output_file, "community/schema.yml")

    def test_posts(self):
        self.assertEqual([(f.name, f.type) for f in posts_collection.fields], [("text", TEXT)])
        self.assertTrue(posts_collection.drafts_enabled)
        self.assertTrue(posts_collection.access.allows("read", user=None, id=None))
        self.assertFalse(posts_collection.access.allows("create", user=None, id=None))

    def test_menu(self):
        field = menu_global.get_field("relationship")
        self.assertEqual((field.type, field.relation_to), (RELATIONSHIP, "posts"))
        self.assertTrue(menu_global.drafts_enabled)
        self.assertTrue(menu_global.access.allows("read", user=None, id=None))
