# apps/core/apps.py

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuração da app Core"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core - Cadastros da Imobiliária'

    def ready(self):
        """
        Conecta os sinais de cache e histórico de tarefas
        """
        from . import signals  # noqa: F401
