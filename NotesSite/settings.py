"""
Django settings for NotesSite.

Only what the Markdown rendering pipeline needs: the enrichment app, the
template engine for the ``markdown`` filter, logging, and the ENRICHMENT
block read by ``enrichment.markdown.config``.
"""

import os

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "django-insecure-change-me")

DEBUG = os.getenv("DJANGO_DEBUG", "false").lower() == "true"

ALLOWED_HOSTS = [
    host.strip()
    for host in os.getenv("DJANGO_ALLOWED_HOSTS", "127.0.0.1,localhost").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "enrichment",
]

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
            ],
        },
    },
]

# Rich content enrichment (link mentions, pseudocode, embeds)
ENRICHMENT = {
    # Seconds before a metadata request is abandoned
    "METADATA_TIMEOUT": float(os.getenv("ENRICHMENT_METADATA_TIMEOUT", "6.5")),
    "OEMBED_ENDPOINT": "https://publish.twitter.com/oembed",
    "PSEUDOCODE_LANGUAGES": ["pseudocode", "pseudo", "algorithm", "algo"],
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "{levelname} {asctime} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "enrichment": {
            "handlers": ["console"],
            "level": os.getenv("ENRICHMENT_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
