"""
Production settings
"""
from .base import *

DEBUG = False

# Production security settings
SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'

# Production database must come from DATABASE_URL (PostgreSQL)
_default_db = env.db('DATABASE_URL')
_default_db.setdefault('CONN_MAX_AGE', 60)
if _default_db.get('ENGINE') != 'django.db.backends.postgresql':
    from django.core.exceptions import ImproperlyConfigured
    raise ImproperlyConfigured('Production requires PostgreSQL (row locks guard the serial counter).')
DATABASES['default'] = _default_db
