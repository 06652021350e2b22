"""Test settings for the floor booking project.

The test database is a file rather than SQLite's in-memory default so
that threads spawned by concurrency tests share it with the test runner.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'test-db.sqlite3',  # noqa: F405
        'OPTIONS': {
            'transaction_mode': 'IMMEDIATE',
            'timeout': BOOKINGS['STORE_TIMEOUT_SECONDS'],  # noqa: F405
        },
        'TEST': {
            'NAME': BASE_DIR / 'test-db.sqlite3',  # noqa: F405
        },
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

LOG_LEVEL = 'WARNING'
LOGGING['handlers']['console']['level'] = LOG_LEVEL  # noqa: F405
