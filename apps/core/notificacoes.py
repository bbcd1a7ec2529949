# apps/core/notificacoes.py

"""
Notificações para o usuário (toasts)

Notificar é sempre "dispara e esquece": uma falha na entrega é registrada
no log e nunca interrompe a operação que gerou a notificação.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.contrib import messages
from django.db import models
from django.utils import timezone

logger = logging.getLogger(__name__)


class TipoNotificacao(models.TextChoices):
    SUCESSO = 'success', 'Sucesso'
    ERRO = 'error', 'Erro'


class Notificador(ABC):
    """Contrato do colaborador de notificações"""

    def notificar(self, tipo, titulo: str, mensagem: str) -> None:
        try:
            self._entregar(TipoNotificacao(tipo), titulo, mensagem)
        except Exception as e:
            logger.warning(f"⚠️ Notificação '{titulo}' não entregue: {e}")

    def sucesso(self, titulo, mensagem=''):
        self.notificar(TipoNotificacao.SUCESSO, titulo, mensagem)

    def erro(self, titulo, mensagem=''):
        self.notificar(TipoNotificacao.ERRO, titulo, mensagem)

    @abstractmethod
    def _entregar(self, tipo: TipoNotificacao, titulo: str, mensagem: str) -> None:
        pass


class NotificadorMensagens(Notificador):
    """Entrega via django.contrib.messages (exibidas no próximo render)"""

    NIVEIS = {
        TipoNotificacao.SUCESSO: messages.SUCCESS,
        TipoNotificacao.ERRO: messages.ERROR,
    }

    def __init__(self, request):
        self.request = request

    def _entregar(self, tipo, titulo, mensagem):
        texto = f"{titulo}: {mensagem}" if mensagem else titulo
        messages.add_message(self.request, self.NIVEIS[tipo], texto)


class NotificadorCanal(Notificador):
    """
    Entrega via WebSocket no grupo pessoal do usuário

    O NotificationConsumer repassa o evento 'notification_message'.
    """

    def __init__(self, usuario_id):
        self.grupo = f'user_{usuario_id}'

    def _entregar(self, tipo, titulo, mensagem):
        channel_layer = get_channel_layer()
        if channel_layer is None:
            return
        async_to_sync(channel_layer.group_send)(
            self.grupo,
            {
                'type': 'notification_message',
                'message': {
                    'tipo': tipo.value,
                    'titulo': titulo,
                    'mensagem': mensagem,
                    'timestamp': timezone.now().isoformat()
                }
            }
        )


class NotificadorAcumulado(Notificador):
    """Guarda as notificações para devolvê-las numa resposta JSON"""

    def __init__(self):
        self.notificacoes: List[Dict] = []

    def _entregar(self, tipo, titulo, mensagem):
        self.notificacoes.append({
            'tipo': tipo.value,
            'titulo': titulo,
            'mensagem': mensagem,
        })


class NotificadorComposto(Notificador):
    """Repassa cada notificação para vários notificadores"""

    def __init__(self, *notificadores):
        self.notificadores = notificadores

    def _entregar(self, tipo, titulo, mensagem):
        for notificador in self.notificadores:
            notificador.notificar(tipo, titulo, mensagem)
