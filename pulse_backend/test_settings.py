import os

os.environ.setdefault('SECRET_KEY', 'test-only-secret-key')

from .settings import *  # noqa: E402,F401,F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
        'OPTIONS': {'transaction_mode': 'IMMEDIATE', 'timeout': 20},
        'TEST': {'NAME': str(BASE_DIR / 'test_db.sqlite3')},
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

REST_FRAMEWORK = dict(REST_FRAMEWORK)
REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []

# No channel layer: publishing only reaches in-process subscriptions.
CHANNEL_LAYERS = {}

MATCHING = dict(MATCHING, EVENT_SINK='matching.events.NullSink', CONTENTION_BACKOFF=0)
