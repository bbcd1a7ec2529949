# apps/metas/apps.py

from django.apps import AppConfig


class MetasConfig(AppConfig):
    """Configuração da app Metas"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.metas'
    verbose_name = 'Metas - Meta Gestão'
