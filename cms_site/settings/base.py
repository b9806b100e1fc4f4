"""
Base Django settings for the Community CMS.

Layout
------
- Split settings: `base.py` (shared), `dev.py` (developer overrides), `prod.py` (hardened).
- `environ` is used to source configuration; a local `.env` is optional in dev.

Content
-------
- `CONTENT_CONFIG` is the dotted path of the active `SiteConfig`
  (default `community.config.config`). Collections, globals, the schema output
  path and the `on_init` hook all come from it.

API stack
---------
- Django 5.x + DRF + django-filter + drf-spectacular.
- SessionAuthentication with CSRF (kept enabled).
- Permissions are decided per entity by the config's access rules
  (`core.permissions.EntityAccessPermission`); the global default stays
  `IsAuthenticated` for anything else.
- Throttling: global (`anon`, `user`) plus the `auth-login` scope.

Observability
-------------
- `core.middleware.RequestIDLogMiddleware` logs a single structured line per request
  (with request id, user id, duration). `RequestSizeLimitMiddleware` rejects large
  unsafe requests early with a 413 JSON error.
- `content.api` logs every write at INFO.
"""

from pathlib import Path
import environ

# ---------------------------------------------------------------------
# Paths & Env
# ---------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env = environ.Env(DEBUG=(bool, False))
env_file = BASE_DIR / ".env"
if env_file.exists():
    environ.Env.read_env(str(env_file))

# ---------------------------------------------------------------------
# Core
# ---------------------------------------------------------------------
SECRET_KEY = env("SECRET_KEY", default="dev-insecure-change-me")
DEBUG = env.bool("DEBUG", False)

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["127.0.0.1", "localhost"])
CSRF_TRUSTED_ORIGINS = env.list(
    "CSRF_TRUSTED_ORIGINS",
    default=["http://127.0.0.1:8000", "http://localhost:8000"],
)

# ---------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------
INSTALLED_APPS = [
    # Django apps
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # Third-party
    "rest_framework",
    "django_filters",
    "drf_spectacular",

    # Local apps
    "accounts",
    "core",
    "content",
    "community",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    # Reject large requests before parsing
    "core.middleware.RequestSizeLimitMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Observability: request-id + structured request log (one line per request)
    "core.middleware.RequestIDLogMiddleware",
]

ROOT_URLCONF = "cms_site.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "cms_site.wsgi.application"

# ---------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------
DATABASES = {
    "default": env.db(
        "DATABASE_URL",
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
    )
}

# ---------------------------------------------------------------------
# Password validation
# ---------------------------------------------------------------------
# The seeded dev account uses a short password; validators apply to admin forms
# and `changepassword`, not to content API writes.
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

# ---------------------------------------------------------------------
# Internationalization
# ---------------------------------------------------------------------
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ---------------------------------------------------------------------
# Static
# ---------------------------------------------------------------------
STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ---------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------
CONTENT_CONFIG = env("CONTENT_CONFIG", default="community.config.config")

# ---------------------------------------------------------------------
# DRF & API Schema
# ---------------------------------------------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_PAGINATION_CLASS": "rest_framework.pagination.PageNumberPagination",
    "PAGE_SIZE": 25,
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "DEFAULT_THROTTLE_CLASSES": [
        "rest_framework.throttling.AnonRateThrottle",
        "rest_framework.throttling.UserRateThrottle",
        "rest_framework.throttling.ScopedRateThrottle",
    ],
    "DEFAULT_THROTTLE_RATES": {
        "user": env("DRF_THROTTLE_RATE_USER", default="200/min"),
        "anon": env("DRF_THROTTLE_RATE_ANON", default="50/min"),
        "auth-login": env("DRF_THROTTLE_RATE_AUTH_LOGIN", default="10/min"),
    },
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Community CMS API",
    "DESCRIPTION": "REST API for the community site's collections and globals, with drafts and versions.",
    "VERSION": "0.1.0",
    "SERVERS": [
        {"url": "http://127.0.0.1:8000", "description": "Local Dev"},
        {"url": "/", "description": "Current"},
    ],
    "OPERATION_ID_DUPLICATE_MODE": "suffix",
    "COMPONENT_SPLIT_REQUEST": True,
    "SWAGGER_UI_SETTINGS": {"persistAuthorization": True},
    "ENUM_NAME_OVERRIDES": {
        "DocumentStatusEnum": "content.models.DocumentStatus",
    },
}

# --- Size/Limits ---------------------------------------------------------------
# Max body size for unsafe methods (bytes)
MAX_REQUEST_BYTES = env.int("MAX_REQUEST_BYTES", default=2_000_000)

# ---------------------------------------------------------------------
# Security defaults (safe baseline; prod hardening in prod.py)
# ---------------------------------------------------------------------
SESSION_COOKIE_SAMESITE = "Lax"
CSRF_COOKIE_SAMESITE = "Lax"
X_FRAME_OPTIONS = "DENY"

# ---------------------------------------------------------------------
# Auth model
# ---------------------------------------------------------------------
AUTH_USER_MODEL = "accounts.User"

# ---------------------------------------------------------------------
# Logging (observability)
# ---------------------------------------------------------------------
# The RequestIDFilter injects `request_id` even for logs outside HTTP contexts
# (e.g. `init_site`), where it reads "-".
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "request_id": {"()": "core.logging.RequestIDFilter"},
    },
    "formatters": {
        # Request lines carry the extras set by RequestIDLogMiddleware.
        "structured": {
            "format": "level=%(levelname)s logger=%(name)s request_id=%(request_id)s "
                      "method=%(method)s path=%(path)s status=%(status)s user_id=%(user_id)s duration_ms=%(duration_ms)s "
                      "message=%(message)s"
        },
        "simple": {
            "format": "level=%(levelname)s logger=%(name)s request_id=%(request_id)s message=%(message)s"
        },
    },
    "handlers": {
        "requests": {
            "class": "logging.StreamHandler",
            "filters": ["request_id"],
            "formatter": "structured",
        },
        "console": {
            "class": "logging.StreamHandler",
            "filters": ["request_id"],
            "formatter": "simple",
        },
    },
    "loggers": {
        "content.request": {
            "handlers": ["requests"],
            "level": "INFO",
            "propagate": False,
        },
        "content": {
            "handlers": ["console"],
            "level": env("CONTENT_LOG_LEVEL", default="INFO"),
            "propagate": False,
        },
    },
}
