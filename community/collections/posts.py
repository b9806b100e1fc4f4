"""`posts`: a versioned collection with drafts; readable by anyone."""

from content.access import anyone
from content.config import TEXT, Access, CollectionConfig, Field, Versions

POSTS_SLUG = "posts"

posts_collection = CollectionConfig(
    slug=POSTS_SLUG,
    fields=[
        Field(name="text", type=TEXT),
    ],
    versions=Versions(drafts=True),
    access=Access(read=anyone),
)
