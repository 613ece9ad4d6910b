"""
Development settings
"""
from .base import *

DEBUG = True

LOGGING['loggers']['verification']['level'] = 'DEBUG'

# Email backend (console for development)
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'
