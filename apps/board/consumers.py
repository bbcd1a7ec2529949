# apps/board/consumers.py

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.core.exceptions import PermissionDenied, ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone

from apps.core.notificacoes import NotificadorAcumulado, NotificadorCanal, NotificadorComposto
from apps.core.repositorio import ErroPersistencia
from .quadros import QUADROS
from .services import abrir_quadro, grupo_quadro, mover_item

logger = logging.getLogger(__name__)


def _json(dados):
    return json.dumps(dados, cls=DjangoJSONEncoder)


class BoardConsumer(AsyncWebsocketConsumer):
    """
    Consumer WebSocket de um quadro Kanban

    Funcionalidades:
    - Movimentação de cards (mover_item)
    - Aviso de movimentações feitas por outros usuários
    - Indicação de usuários online
    - Sincronização do estado do quadro
    """

    async def connect(self):
        self.quadro = self.scope['url_route']['kwargs']['quadro']
        self.board_group_name = grupo_quadro(self.quadro)
        self.user = self.scope['user']

        if not self.user.is_authenticated:
            logger.warning("❌ Conexão WebSocket rejeitada - usuário não autenticado")
            await self.close()
            return

        if self.quadro not in QUADROS:
            logger.warning(f"❌ Conexão WebSocket rejeitada - quadro {self.quadro} não existe")
            await self.close()
            return

        await self.channel_layer.group_add(self.board_group_name, self.channel_name)
        await self.accept()

        await self.channel_layer.group_send(
            self.board_group_name,
            {
                'type': 'user_joined',
                'message': {
                    'usuario': self.user.get_full_name() or self.user.username,
                    'user_id': self.user.id,
                    'timestamp': self.get_timestamp()
                }
            }
        )

        logger.info(f"✅ WebSocket conectado - {self.user.username} no quadro {self.quadro}")

    async def disconnect(self, close_code):
        if hasattr(self, 'board_group_name') and self.user.is_authenticated:
            await self.channel_layer.group_send(
                self.board_group_name,
                {
                    'type': 'user_left',
                    'message': {
                        'usuario': self.user.get_full_name() or self.user.username,
                        'user_id': self.user.id,
                        'timestamp': self.get_timestamp()
                    }
                }
            )
            await self.channel_layer.group_discard(self.board_group_name, self.channel_name)

        logger.info(f"🔌 WebSocket desconectado do quadro {getattr(self, 'quadro', '?')}")

    async def receive(self, text_data):
        """
        Mensagens do cliente:
        - ping
        - sync_board
        - mover_item {item_id, origem, destino}
        """
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            logger.error(f"❌ JSON inválido recebido via WebSocket de {self.user.username}")
            return

        message_type = data.get('type')

        if message_type == 'ping':
            await self.send(text_data=_json({'type': 'pong', 'timestamp': self.get_timestamp()}))

        elif message_type == 'sync_board':
            await self.send(text_data=_json({
                'type': 'board_sync',
                'board_data': await self.get_board_state(),
                'timestamp': self.get_timestamp()
            }))

        elif message_type == 'mover_item':
            resposta = await self.mover(data.get('item_id'), data.get('origem'), data.get('destino'))
            await self.send(text_data=_json(dict(resposta, type='move_result')))

    # === Handlers de eventos do grupo ===

    async def item_moved(self, event):
        """Movimentação feita por outro usuário (o autor já recebeu move_result)"""
        message = event['message']
        if message.get('user_id') != self.user.id:
            await self.send(text_data=_json({'type': 'item_moved', 'message': message}))

    async def user_joined(self, event):
        message = event['message']
        if message['user_id'] != self.user.id:
            await self.send(text_data=_json({'type': 'user_joined', 'message': message}))

    async def user_left(self, event):
        message = event['message']
        if message['user_id'] != self.user.id:
            await self.send(text_data=_json({'type': 'user_left', 'message': message}))

    async def board_refresh(self, event):
        """Força refresh do quadro (ex: etapa removida)"""
        await self.send(text_data=_json({'type': 'board_refresh', 'message': event['message']}))

    # === Métodos auxiliares ===

    @database_sync_to_async
    def mover(self, item_id, origem, destino):
        acumulado = NotificadorAcumulado()
        notificador = NotificadorComposto(acumulado, NotificadorCanal(self.user.id))
        try:
            resultado = mover_item(self.user, self.quadro, item_id, origem, destino, notificador)
        except ValidationError as e:
            return {'success': False, 'error': '; '.join(e.messages)}
        except PermissionDenied as e:
            return {'success': False, 'error': str(e)}
        except ErroPersistencia as e:
            logger.error(f"❌ Erro ao carregar quadro {self.quadro}: {e}")
            return {'success': False, 'error': 'Erro ao carregar quadro'}

        return {
            'success': resultado.sucesso,
            'resultado': resultado.para_dict(),
            'error': resultado.erro,
            'notificacoes': acumulado.notificacoes,
        }

    @database_sync_to_async
    def get_board_state(self):
        """Quantidade de itens por coluna"""
        try:
            kanban = abrir_quadro(self.quadro, NotificadorAcumulado())
        except ErroPersistencia as e:
            logger.error(f"❌ Erro ao obter estado do quadro: {e}")
            return {}

        return {
            'quadro': self.quadro,
            'colunas': [
                {
                    'valor': coluna['valor'],
                    'titulo': coluna['titulo'],
                    'cor': coluna['cor'],
                    'total_items': coluna['total'],
                    'item_ids': [item['id'] for item in coluna['itens']],
                }
                for coluna in kanban.agrupado()
            ]
        }

    def get_timestamp(self):
        return timezone.now().isoformat()


class NotificationConsumer(AsyncWebsocketConsumer):
    """
    Notificações (toasts) do usuário
    Separado do quadro para receber avisos em qualquer página
    """

    async def connect(self):
        self.user = self.scope['user']

        if not self.user.is_authenticated:
            await self.close()
            return

        self.user_group_name = f'user_{self.user.id}'
        await self.channel_layer.group_add(self.user_group_name, self.channel_name)
        await self.accept()
        logger.info(f"🔔 Notificações conectadas para {self.user.username}")

    async def disconnect(self, close_code):
        if hasattr(self, 'user_group_name'):
            await self.channel_layer.group_discard(self.user_group_name, self.channel_name)
            logger.info(f"🔕 Notificações desconectadas para {self.user.username}")

    async def notification_message(self, event):
        await self.send(text_data=_json({
            'type': 'notification',
            'message': event['message']
        }))
