"""
HTTP surface generated from the community site config.

- `posts` is readable by anyone; writes need a signed-in user.
- `?draft=true` on writes saves a draft; on reads returns the latest draft.
- Version listings need `read_versions` (signed-in by default) and accept
  django-filter params.
- The `menu` global is readable by anyone and updated with POST or PATCH.
"""

from __future__ import annotations

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient, APIRequestFactory, APITestCase

from accounts.models import User
from content.api import ContentAPI
from content.config import TEXT, Access, CollectionConfig, Field, Versions, build_config
from content.models import Version
from content.views import VersionViewSet


class ContentViewTestCase(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="editor@example.com", password="pass12345")
        self.anon = APIClient()
        self.client = APIClient()
        self.client.force_authenticate(self.user)
        self.api = ContentAPI()


class CollectionViewTests(ContentViewTestCase):
    def test_anonymous_list(self):
        self.api.create("posts", data={"text": "hello"})
        r = self.anon.get("/api/posts/")
        self.assertEqual(r.status_code, 200, r.content)
        body = r.json()
        self.assertEqual(body["total_docs"], 1)
        self.assertEqual(body["docs"][0]["text"], "hello")
        self.assertEqual(body["docs"][0]["_status"], "published")

    def test_anonymous_write_is_forbidden(self):
        r = self.anon.post("/api/posts/", {"text": "nope"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_and_retrieve(self):
        r = self.client.post("/api/posts/", {"text": "hi"}, format="json")
        self.assertEqual(r.status_code, 201, r.content)
        post_id = r.json()["id"]

        detail = self.anon.get(f"/api/posts/{post_id}/")
        self.assertEqual(detail.status_code, 200)
        self.assertEqual(detail.json()["text"], "hi")

    def test_draft_patch_is_invisible_to_published_reads(self):
        post = self.api.create("posts", data={"text": "published example post"})

        r = self.client.patch(f"/api/posts/{post['id']}/?draft=true", {"text": "draft example post"}, format="json")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.json()["_status"], "draft")

        self.assertEqual(self.anon.get(f"/api/posts/{post['id']}/").json()["text"], "published example post")
        self.assertEqual(
            self.client.get(f"/api/posts/{post['id']}/?draft=true").json()["text"], "draft example post"
        )

    def test_draft_create_is_not_listed(self):
        r = self.client.post("/api/posts/?draft=true", {"text": "wip"}, format="json")
        self.assertEqual(r.status_code, 201, r.content)
        post_id = r.json()["id"]

        self.assertEqual(self.anon.get("/api/posts/").json()["total_docs"], 0)
        self.assertEqual(self.anon.get(f"/api/posts/{post_id}/").status_code, 404)
        self.assertEqual(self.client.get("/api/posts/?draft=true").json()["total_docs"], 1)

    def test_list_filters_sort_and_limit(self):
        for text in ("b", "a", "c"):
            self.api.create("posts", data={"text": text})

        filtered = self.anon.get("/api/posts/?text=a").json()
        self.assertEqual([d["text"] for d in filtered["docs"]], ["a"])

        page = self.anon.get("/api/posts/?sort=text&limit=2&page=2").json()
        self.assertEqual([d["text"] for d in page["docs"]], ["c"])
        self.assertEqual(page["total_pages"], 2)

    def test_invalid_query_params(self):
        self.assertEqual(self.anon.get("/api/posts/?depth=deep").status_code, 400)
        self.assertEqual(self.anon.get("/api/posts/?draft=maybe").status_code, 400)
        self.assertEqual(self.anon.get("/api/posts/?page=0").status_code, 400)

    def test_validation_error(self):
        r = self.client.post("/api/posts/", ["not", "an", "object"], format="json")
        self.assertEqual(r.status_code, 400)

    def test_missing_document(self):
        self.assertEqual(self.anon.get("/api/posts/999999/").status_code, 404)

    def test_delete(self):
        post = self.api.create("posts", data={"text": "bye"})
        self.assertEqual(self.anon.delete(f"/api/posts/{post['id']}/").status_code, 403)

        r = self.client.delete(f"/api/posts/{post['id']}/")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.json()["text"], "bye")
        self.assertEqual(self.anon.get(f"/api/posts/{post['id']}/").status_code, 404)

    def test_unknown_collection(self):
        self.assertEqual(self.client.get("/api/pages/").status_code, 404)

    def test_users_collection(self):
        self.assertEqual(self.anon.get("/api/users/").status_code, 403)

        r = self.client.get("/api/users/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual([d["email"] for d in r.json()["docs"]], ["editor@example.com"])

        created = self.client.post("/api/users/", {"email": "new@example.com", "password": "pw"}, format="json")
        self.assertEqual(created.status_code, 201, created.content)
        self.assertNotIn("password", created.json())

    def test_users_auth_routes_are_not_documents(self):
        r = self.client.get("/api/users/me/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["email"], "editor@example.com")


class VersionViewTests(ContentViewTestCase):
    def setUp(self):
        super().setUp()
        self.post = self.api.create("posts", data={"text": "v1"})
        self.api.update("posts", self.post["id"], data={"text": "v2"}, draft=True)

    def test_requires_read_versions_access(self):
        self.assertEqual(self.anon.get("/api/posts/versions/").status_code, 403)

    def test_list_and_filters(self):
        r = self.client.get("/api/posts/versions/")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.json()["count"], 2)
        newest = r.json()["results"][0]
        self.assertEqual(newest["version"]["text"], "v2")
        self.assertEqual(newest["version"]["_status"], "draft")
        self.assertEqual(newest["parent"], self.post["id"])

        latest = self.client.get(f"/api/posts/versions/?parent={self.post['id']}&latest=true").json()
        self.assertEqual(latest["count"], 1)
        published = self.client.get("/api/posts/versions/?status=published").json()
        self.assertEqual(published["results"][0]["version"]["text"], "v1")

        oldest_first = self.client.get("/api/posts/versions/?ordering=id").json()
        self.assertEqual(oldest_first["results"][0]["version"]["text"], "v1")

    def test_restore(self):
        version = Version.objects.get(document_id=self.post["id"], status="published")
        r = self.client.post(f"/api/posts/versions/{version.pk}/restore/")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.json()["text"], "v1")
        self.assertEqual(self.anon.get(f"/api/posts/{self.post['id']}/?draft=true").json()["text"], "v1")

    def test_restore_requires_update_access(self):
        version = Version.objects.filter(document_id=self.post["id"]).first()
        self.assertEqual(self.anon.post(f"/api/posts/versions/{version.pk}/restore/").status_code, 403)


class GlobalViewTests(ContentViewTestCase):
    def test_read_before_first_save(self):
        r = self.anon.get("/api/globals/menu/")
        self.assertEqual(r.status_code, 200)
        self.assertIsNone(r.json()["relationship"])

    def test_update_populates_relationship(self):
        post = self.api.create("posts", data={"text": "linked"})

        r = self.client.post("/api/globals/menu/", {"relationship": post["id"]}, format="json")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.json()["relationship"]["text"], "linked")

        flat = self.anon.get("/api/globals/menu/?depth=0").json()
        self.assertEqual(flat["relationship"], post["id"])

    def test_patch_draft(self):
        first = self.api.create("posts", data={"text": "first"})
        second = self.api.create("posts", data={"text": "second"})
        self.api.update_global("menu", data={"relationship": first["id"]})

        r = self.client.patch("/api/globals/menu/?draft=true", {"relationship": second["id"]}, format="json")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(self.anon.get("/api/globals/menu/").json()["relationship"]["text"], "first")
        self.assertEqual(self.anon.get("/api/globals/menu/?draft=true").json()["relationship"]["text"], "second")

    def test_anonymous_update_is_forbidden(self):
        self.assertEqual(self.anon.post("/api/globals/menu/", {}, format="json").status_code, 403)

    def test_bad_relationship(self):
        r = self.client.post("/api/globals/menu/", {"relationship": 999999}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("relationship", r.json())

    def test_versions(self):
        self.api.update_global("menu", data={})
        self.api.update_global("menu", data={}, draft=True)
        r = self.client.get("/api/globals/menu/versions/")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.json()["count"], 2)


class VersionAccessRuleTests(TestCase):
    def setUp(self):
        self.seen = []

        def record(user=None, id=None, **kwargs):
            self.seen.append(id)
            return True

        self.entity = CollectionConfig(
            slug="journal",
            fields=[Field(name="text", type=TEXT)],
            versions=Versions(),
            access=Access(read_versions=record),
        )
        self.site = build_config(collections=[self.entity])
        self.factory = APIRequestFactory()

    def test_detail_rule_gets_the_document_id(self):
        api = ContentAPI(self.site)
        first = api.create("journal", data={"text": "one"})
        api.update("journal", first["id"], data={"text": "two"})
        doc = api.create("journal", data={"text": "three"})
        version = Version.objects.get(document_id=doc["id"])

        view = VersionViewSet.for_entity(self.entity, self.site).as_view({"get": "retrieve"})
        r = view(self.factory.get(f"/api/journal/versions/{version.pk}/"), pk=str(version.pk))
        self.assertEqual(r.status_code, 200, r.data)
        self.assertEqual(self.seen, [doc["id"]])

    def test_list_rule_gets_no_id(self):
        view = VersionViewSet.for_entity(self.entity, self.site).as_view({"get": "list"})
        r = view(self.factory.get("/api/journal/versions/"))
        self.assertEqual(r.status_code, 200, r.data)
        self.assertEqual(self.seen, [None])
