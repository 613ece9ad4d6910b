import logging
from django.apps import AppConfig
from django.db import connection

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'
    verbose_name = 'Core (Organization)'

    def ready(self):
        vendor = connection.vendor
        logger.info('DB=%s', vendor)
        if vendor != 'postgresql':
            logger.warning('DB=%s has no row locks; serial allocation relies on database write serialization', vendor)
