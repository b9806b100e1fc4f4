"""
Site config building and sanitization.

`build_config()` adds the `users` auth collection when none is declared and
rejects declarations the content API could not serve.
"""

from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase

from content.access import anyone, authenticated
from content.config import (
    NUMBER,
    RELATIONSHIP,
    TEXT,
    Access,
    CollectionConfig,
    Field,
    GlobalConfig,
    SchemaConfig,
    Versions,
    build_config,
)
from content.exceptions import UnknownEntity


def _posts(**overrides):
    options = {"slug": "posts", "fields": [Field(name="text", type=TEXT)]}
    options.update(overrides)
    return CollectionConfig(**options)


class BuildConfigTests(SimpleTestCase):
    def test_adds_users_auth_collection_by_default(self):
        config = build_config(collections=[_posts()])
        self.assertEqual([c.slug for c in config.collections], ["users", "posts"])
        self.assertTrue(config.auth_collection.auth)
        self.assertEqual(config.auth_collection.get_field("email").type, "email")

    def test_keeps_declared_auth_collection(self):
        members = CollectionConfig(slug="members", auth=True, fields=[Field(name="email", type="email")])
        config = build_config(collections=[members, _posts()])
        self.assertEqual(config.auth_collection.slug, "members")
        self.assertEqual(len(config.collections), 2)

    def test_lookups(self):
        menu = GlobalConfig(slug="menu", fields=[Field(name="relationship", type=RELATIONSHIP, relation_to="posts")])
        config = build_config(collections=[_posts()], globals=[menu])
        self.assertIs(config.get_global("menu"), menu)
        self.assertEqual(config.get_collection("posts").slug, "posts")
        with self.assertRaises(UnknownEntity):
            config.get_collection("menu")
        with self.assertRaises(UnknownEntity):
            config.get_global("posts")

    def test_defaults(self):
        config = build_config(collections=[_posts()])
        self.assertEqual(config.schema, SchemaConfig())
        self.assertIsNone(config.on_init)
        posts = config.get_collection("posts")
        self.assertFalse(posts.drafts_enabled)
        self.assertIs(posts.access.read, authenticated)
        self.assertIsInstance(posts.fields, tuple)

    def test_display_name(self):
        self.assertEqual(_posts(slug="blog-posts").display_name, "BlogPosts")
        self.assertEqual(_posts(label="Article").display_name, "Article")

    def test_schema_path_resolution(self):
        self.assertEqual(str(SchemaConfig("out/schema.yml").resolve_path("/srv/app")), "/srv/app/out/schema.yml")
        self.assertEqual(str(SchemaConfig("/tmp/schema.yml").resolve_path("/srv/app")), "/tmp/schema.yml")


class SanitizeTests(SimpleTestCase):
    def assertRejected(self, **kwargs):
        with self.assertRaises(ImproperlyConfigured):
            build_config(**kwargs)

    def test_duplicate_collection_slugs(self):
        self.assertRejected(collections=[_posts(), _posts()])

    def test_duplicate_global_slugs(self):
        self.assertRejected(globals=[GlobalConfig(slug="menu"), GlobalConfig(slug="menu")])

    def test_same_slug_for_collection_and_global_is_allowed(self):
        config = build_config(collections=[_posts()], globals=[GlobalConfig(slug="posts")])
        self.assertEqual(config.get_global("posts").slug, "posts")

    def test_invalid_slug(self):
        self.assertRejected(collections=[_posts(slug="Bad Slug")])

    def test_globals_slug_is_reserved_for_collections(self):
        self.assertRejected(collections=[_posts(slug="globals")])

    def test_reserved_field_names(self):
        for name in ("id", "_status", "created_at", "updated_at"):
            with self.subTest(name=name):
                self.assertRejected(collections=[_posts(fields=[Field(name=name, type=TEXT)])])

    def test_duplicate_field_names(self):
        self.assertRejected(collections=[_posts(fields=[Field(name="text", type=TEXT), Field(name="text", type=NUMBER)])])

    def test_unknown_field_type(self):
        self.assertRejected(collections=[_posts(fields=[Field(name="body", type="richText")])])

    def test_relationship_without_target(self):
        self.assertRejected(collections=[_posts(fields=[Field(name="parent", type=RELATIONSHIP)])])

    def test_dangling_relationship(self):
        menu = GlobalConfig(slug="menu", fields=[Field(name="relationship", type=RELATIONSHIP, relation_to="pages")])
        self.assertRejected(collections=[_posts()], globals=[menu])

    def test_relationship_to_users_is_allowed(self):
        config = build_config(collections=[_posts(fields=[Field(name="author", type=RELATIONSHIP, relation_to="users")])])
        self.assertEqual(config.get_collection("posts").get_field("author").relation_to, "users")

    def test_has_many_only_on_relationships(self):
        self.assertRejected(collections=[_posts(fields=[Field(name="text", type=TEXT, has_many=True)])])

    def test_more_than_one_auth_collection(self):
        self.assertRejected(collections=[
            CollectionConfig(slug="users", auth=True, fields=[Field(name="email", type="email")]),
            CollectionConfig(slug="admins", auth=True, fields=[Field(name="email", type="email")]),
        ])


class AccessTests(SimpleTestCase):
    def test_default_rules_require_authentication(self):
        access = Access()
        self.assertFalse(access.allows("read", user=None, id=None))

        class _User:
            is_authenticated = True

        self.assertTrue(access.allows("update", user=_User(), id=1))

    def test_anyone(self):
        self.assertTrue(Access(read=anyone).allows("read", user=None, id=None))

    def test_rules_receive_user_and_id(self):
        calls = []

        def owner_only(user=None, id=None, **kwargs):
            calls.append((user, id))
            return id == 7

        access = Access(delete=owner_only)
        self.assertTrue(access.allows("delete", user="u", id=7))
        self.assertFalse(access.allows("delete", user="u", id=8))
        self.assertEqual(calls, [("u", 7), ("u", 8)])

    def test_unknown_operation(self):
        with self.assertRaises(ValueError):
            Access().allows("publish", user=None)

    def test_versions_defaults(self):
        self.assertEqual(Versions(), Versions(drafts=False, max_per_doc=100))
