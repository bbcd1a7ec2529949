# apps/board/services.py

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.exceptions import PermissionDenied, ValidationError
from django.utils import timezone

from apps.core.cache import CacheColecoes
from apps.core.permissions import ImobiliariaPermissions
from apps.core.repositorio import RepositorioDjango
from .movimentacao import QuadroOtimista, StatusMovimento
from .quadros import obter_definicao

logger = logging.getLogger(__name__)


def grupo_quadro(nome_quadro):
    return f'board_{nome_quadro}'


def abrir_quadro(nome_quadro, notificador, repositorio=None, cache=None):
    """Quadro otimista sobre o banco, lido pelo cache de coleções"""
    return QuadroOtimista(
        obter_definicao(nome_quadro),
        repositorio or RepositorioDjango(),
        notificador,
        cache or CacheColecoes(),
    )


def mover_item(usuario, nome_quadro, item_id, origem, destino, notificador):
    """
    Move item de um quadro em nome do usuário
    Usado pela view AJAX e pelo WebSocket

    Raises:
        ValidationError: quadro, item ou coluna inválidos
        PermissionDenied: usuário não pode mover o item
    """
    quadro = abrir_quadro(nome_quadro, notificador)

    if item_id in (None, ''):
        raise ValidationError("Item não informado")

    item = quadro.item(item_id)
    if item is None:
        raise ValidationError(f"Item {item_id} não encontrado")

    if not ImobiliariaPermissions.pode_mover_item(usuario, nome_quadro, item):
        logger.warning(f"🚫 {usuario.username} tentou mover item {item_id} do quadro {nome_quadro}")
        raise PermissionDenied('Sem permissão para mover item')

    resultado = quadro.mover(item_id, origem, destino)

    if resultado.status == StatusMovimento.MOVIDO:
        transmitir_movimento(nome_quadro, resultado, usuario)

    return resultado


def transmitir_movimento(nome_quadro, resultado, usuario):
    """Avisa os demais usuários conectados ao quadro"""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return

    async_to_sync(channel_layer.group_send)(
        grupo_quadro(nome_quadro),
        {
            'type': 'item_moved',
            'message': {
                'quadro': nome_quadro,
                'item_id': resultado.item_id,
                'origem': resultado.origem,
                'destino': resultado.destino,
                'usuario': usuario.get_full_name() or usuario.username,
                'user_id': usuario.id,
                'timestamp': timezone.now().isoformat()
            }
        }
    )


def pedir_atualizacao(nomes_quadros, motivo):
    """Pede aos quadros abertos que recarreguem (mudança de colunas)"""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return

    for nome in nomes_quadros:
        async_to_sync(channel_layer.group_send)(
            grupo_quadro(nome),
            {
                'type': 'board_refresh',
                'message': {'motivo': motivo, 'timestamp': timezone.now().isoformat()}
            }
        )
