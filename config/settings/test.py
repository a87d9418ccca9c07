# config/settings/test.py

from .base import *

# === TESTES ===

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'chestnut-test-cache',
    }
}

SESSION_ENGINE = 'django.contrib.sessions.backends.db'

# Lock em processo; wait curto para os testes de Busy não demorarem
CARD_MOVE_LOCK = {
    'BACKEND': 'apps.board.locks.LocalLockBackend',
    'NAME': 'moveCard',
    'WAIT_TIMEOUT': 0.2,
    'LEASE_TIMEOUT': 5.0,
    'OPTIONS': {},
}

STORAGES['staticfiles'] = {
    'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

# Desabilitar logs em testes
LOGGING['handlers'] = {
    'null': {'class': 'logging.NullHandler'},
}
LOGGING['root']['handlers'] = ['null']
LOGGING['loggers'] = {
    'apps': {
        'handlers': ['null'],
        'level': 'DEBUG',
        'propagate': True,
    },
}
