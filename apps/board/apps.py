# apps/board/apps.py

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class BoardConfig(AppConfig):
    """Quadros Kanban: tarefas, acompanhamento de vendas e X1"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.board'
    verbose_name = 'Board - Quadros Kanban'

    def ready(self):
        logger.debug("🔌 Board App inicializada - WebSockets habilitados")
