"""Development login seeded by `manage.py init_site`. Never use outside local dev."""

DEV_USER = {
    "email": "dev@payloadcms.com",
    "password": "test",
}
