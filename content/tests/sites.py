"""Site configs used by the content tests (independent of the community site)."""

from content.access import anyone
from content.config import (
    CHECKBOX,
    NUMBER,
    RELATIONSHIP,
    TEXT,
    TEXTAREA,
    Access,
    CollectionConfig,
    Field,
    GlobalConfig,
    Versions,
    build_config,
)


def nobody(**kwargs) -> bool:
    return False


articles = CollectionConfig(
    slug="articles",
    fields=[
        Field(name="title", type=TEXT, required=True),
        Field(name="views", type=NUMBER),
        Field(name="featured", type=CHECKBOX, default=False),
        Field(name="related", type=RELATIONSHIP, relation_to="articles", has_many=True),
        Field(name="author", type=RELATIONSHIP, relation_to="users"),
    ],
    versions=Versions(drafts=True, max_per_doc=3),
    access=Access(read=anyone),
)

notes = CollectionConfig(
    slug="notes",
    fields=[
        Field(name="body", type=TEXTAREA),
        Field(name="secret", type=RELATIONSHIP, relation_to="secrets"),
    ],
)

secrets = CollectionConfig(
    slug="secrets",
    fields=[Field(name="body", type=TEXT)],
    versions=Versions(),
    access=Access(read=nobody),
)

homepage = GlobalConfig(
    slug="homepage",
    fields=[
        Field(name="title", type=TEXT),
        Field(name="featured", type=RELATIONSHIP, relation_to="articles"),
    ],
    versions=Versions(drafts=True),
    access=Access(read=anyone),
)

footer = GlobalConfig(slug="footer", fields=[Field(name="text", type=TEXT)])

TEST_SITE = build_config(
    collections=[articles, notes, secrets],
    globals=[homepage, footer],
)
