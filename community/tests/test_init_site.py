"""
`manage.py init_site` against the community config.

After one run:
- the dev user exists and can log in,
- one post is published as "published example post" and has a newer draft
  "draft example post",
- the `menu` global points at that post; its draft read populates the draft.
"""

from __future__ import annotations

from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import CommandError, call_command
from django.test import TestCase

from community.credentials import DEV_USER
from content.api import ContentAPI
from content.models import Document, GlobalDocument, Version

User = get_user_model()


class InitSiteCommandTests(TestCase):
    def run_init(self, *args):
        out = StringIO()
        call_command("init_site", *args, stdout=out)
        return out.getvalue()

    def test_seeds_documented_state(self):
        output = self.run_init()
        self.assertIn("on_init complete", output)

        user = User.objects.get(email=DEV_USER["email"])
        self.assertTrue(user.check_password(DEV_USER["password"]))

        post = Document.objects.get(collection="posts")
        api = ContentAPI()
        self.assertEqual(api.find_by_id("posts", post.pk)["text"], "published example post")
        self.assertEqual(api.find_by_id("posts", post.pk, draft=True)["text"], "draft example post")

        menu_draft = api.find_global("menu", draft=True)
        self.assertEqual(menu_draft["relationship"]["id"], post.pk)
        self.assertEqual(menu_draft["relationship"]["text"], "draft example post")
        self.assertEqual(api.find_global("menu")["relationship"]["text"], "published example post")

        self.assertEqual(Version.objects.filter(document=post).count(), 2)
        self.assertEqual(GlobalDocument.objects.get(slug="menu").status, "published")

    def test_logs_the_two_reads(self):
        with self.assertLogs("content.api", level="INFO") as cap:
            self.run_init()
        reads = [line for line in cap.output if "(draft):" in line]
        self.assertEqual(len(reads), 2)
        self.assertIn("menu (draft)", reads[0])
        self.assertIn("draft example post", reads[1])

    def test_second_run_fails_and_rolls_back(self):
        self.run_init()
        with self.assertRaises(CommandError):
            self.run_init()
        self.assertEqual(Document.objects.filter(collection="posts").count(), 1)

    def test_reset_allows_rerun(self):
        self.run_init()
        admin = User.objects.create_superuser(email="admin@example.com", password="pw")
        output = self.run_init("--reset")
        self.assertIn("deleted", output)
        self.assertEqual(Document.objects.filter(collection="posts").count(), 1)
        self.assertEqual(User.objects.filter(email=DEV_USER["email"]).count(), 1)
        self.assertTrue(User.objects.filter(pk=admin.pk).exists())
