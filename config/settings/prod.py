"""Production settings for the floor booking project.

This module extends the base settings with production specific
configuration. Ensure that sensitive values are provided via
environment variables and that security settings are appropriate for
production use.
"""

import os

from django.core.exceptions import ImproperlyConfigured  # type: ignore

from .base import *  # noqa: F401,F403

# Never run with debug enabled in production
DEBUG = False

if SECRET_KEY == 'replace-me-in-production':  # noqa: F405
    raise ImproperlyConfigured('DJANGO_SECRET_KEY must be set in production')

# Allowed hosts should be defined explicitly via environment variable
ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', '').split(',')

# Configure secure proxies and cookies
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True

# Keep database connections open between requests
DATABASES['default']['CONN_MAX_AGE'] = int(os.environ.get('DB_CONN_MAX_AGE', 60))  # noqa: F405
