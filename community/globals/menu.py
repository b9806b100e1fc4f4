"""`menu`: a versioned global pointing at one post; readable by anyone."""

from content.access import anyone
from content.config import RELATIONSHIP, Access, Field, GlobalConfig, Versions

from community.collections.posts import POSTS_SLUG

MENU_SLUG = "menu"

menu_global = GlobalConfig(
    slug=MENU_SLUG,
    fields=[
        Field(name="relationship", type=RELATIONSHIP, relation_to=POSTS_SLUG),
    ],
    versions=Versions(drafts=True),
    access=Access(read=anyone),
)
