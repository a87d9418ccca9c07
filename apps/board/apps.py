# apps/board/apps.py

import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class BoardConfig(AppConfig):
    """Configuração da app Board"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.board'
    verbose_name = 'Board - Cards'

    def ready(self):
        """Log de inicialização com a configuração do lock de movimentação"""
        config = getattr(settings, 'CARD_MOVE_LOCK', {})
        logger.info(
            "Board App inicializada - lock '%s' via %s (wait=%ss, lease=%ss)",
            config.get('NAME', 'moveCard'),
            config.get('BACKEND', 'apps.board.locks.LocalLockBackend'),
            config.get('WAIT_TIMEOUT'),
            config.get('LEASE_TIMEOUT'),
        )
