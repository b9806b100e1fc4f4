"""
Site configuration for the community sample.

`config` is the object `settings.CONTENT_CONFIG` points at. `on_init` is run by
`manage.py init_site` and seeds:

- the development user (`community.credentials.DEV_USER`),
- one post, published as "published example post" and then updated as a
  draft to "draft example post",
- the `menu` global, pointing at that post.

It then logs the draft reads of the menu (with the post populated) and of the
post itself.
"""

from __future__ import annotations

from content.config import SchemaConfig, build_config

from community.collections.posts import POSTS_SLUG, posts_collection
from community.credentials import DEV_USER
from community.globals.menu import MENU_SLUG, menu_global


def on_init(api) -> None:
    api.create("users", data={"email": DEV_USER["email"], "password": DEV_USER["password"]})

    post = api.create(POSTS_SLUG, draft=False, data={"text": "published example post"})
    post_id = post["id"]

    api.update(POSTS_SLUG, post_id, draft=True, data={"text": "draft example post"})
    api.update_global(MENU_SLUG, data={"relationship": post_id})

    menu = api.find_global(MENU_SLUG, draft=True)
    api.logger.info("menu (draft): %s", menu)

    draft_post = api.find_by_id(POSTS_SLUG, post_id, draft=True)
    api.logger.info("post %s (draft): %s", post_id, draft_post)


config = build_config(
    collections=[posts_collection],
    globals=[menu_global],
    schema=SchemaConfig(output_file="community/schema.yml"),
    on_init=on_init,
)
