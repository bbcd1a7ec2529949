# apps/board/views.py

import logging

from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.http import Http404, JsonResponse
from django.shortcuts import get_object_or_404, render
from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST

from apps.core.cache import CacheColecoes
from apps.core.models import Corretor, TarefaCorretor
from apps.core.notificacoes import NotificadorAcumulado, NotificadorCanal, NotificadorComposto
from apps.core.permissions import ImobiliariaPermissions, ajax_requer_permissao
from apps.core.repositorio import ErroPersistencia, RepositorioDjango
from apps.core.utils import dados_requisicao
from . import quadros
from .services import abrir_quadro, grupo_quadro, mover_item, pedir_atualizacao

logger = logging.getLogger(__name__)


def _mensagem_validacao(erro: ValidationError) -> str:
    return '; '.join(erro.messages)


@login_required
@require_GET
def quadro_kanban_view(request, quadro):
    """
    Quadro Kanban (tarefas, acompanhamento de vendas ou X1)
    Agrupa os itens por coluna, com busca e filtros
    """
    if quadro not in quadros.QUADROS:
        raise Http404("Quadro não encontrado")

    acumulado = NotificadorAcumulado()
    try:
        kanban = abrir_quadro(quadro, acumulado)
    except ErroPersistencia as e:
        logger.error(f"❌ Erro ao carregar quadro {quadro}: {e}")
        return JsonResponse({'success': False, 'error': 'Erro ao carregar quadro'}, status=503)

    corretor_id = request.GET.get('corretor', '')
    if quadro == 'tarefas' and ImobiliariaPermissions.is_corretor(request.user):
        # corretor vê apenas as próprias tarefas
        corretor = getattr(request.user, 'corretor', None)
        corretor_id = corretor.id if corretor else -1

    itens = quadros.filtrar_itens(
        kanban.itens,
        q=request.GET.get('q', ''),
        prioridade=request.GET.get('prioridade', ''),
        corretor_id=corretor_id if quadro == 'tarefas' else None,
    )
    colunas = kanban.agrupado(itens)

    if request.GET.get('formato') == 'json':
        return JsonResponse({
            'success': True,
            'quadro': quadro,
            'colunas': colunas,
            'total': len(itens),
        })

    context = {
        'title': kanban.definicao.titulo,
        'quadro': quadro,
        'definicao': kanban.definicao,
        'colunas': colunas,
        'total': len(itens),
        'prioridades': quadros.contagem_prioridades(itens) if quadro == 'tarefas' else None,
        'corretores': Corretor.objects.filter(status='ativo') if quadro == 'tarefas' else None,
        'filtros': {
            'q': request.GET.get('q', ''),
            'prioridade': request.GET.get('prioridade', ''),
            'corretor': str(corretor_id),
        },
        'pode_gerenciar_etapas': ImobiliariaPermissions.pode_gerenciar_etapas(request.user),
        'websocket_group': grupo_quadro(quadro),
    }

    template = 'board/partials/colunas.html' if request.htmx else 'board/kanban.html'
    return render(request, template, context)


@login_required
@require_POST
def mover_item_ajax(request):
    """
    Move item entre colunas via AJAX
    Usado pelo drag-and-drop

    Corpo: {"quadro": "tarefas", "item_id": 1, "origem": 2, "destino": 3}
    """
    try:
        data = dados_requisicao(request)
    except ValueError:
        return JsonResponse({'success': False, 'error': 'JSON inválido'}, status=400)

    acumulado = NotificadorAcumulado()
    notificador = NotificadorComposto(acumulado, NotificadorCanal(request.user.id))

    try:
        resultado = mover_item(
            request.user,
            data.get('quadro', ''),
            data.get('item_id'),
            data.get('origem'),
            data.get('destino'),
            notificador,
        )
    except ValidationError as e:
        return JsonResponse({'success': False, 'error': _mensagem_validacao(e)}, status=400)
    except PermissionDenied as e:
        return JsonResponse({'success': False, 'error': str(e)}, status=403)
    except ErroPersistencia as e:
        logger.error(f"❌ Erro ao carregar quadro para mover item: {e}")
        return JsonResponse({'success': False, 'error': 'Erro ao carregar quadro'}, status=503)

    return JsonResponse({
        'success': resultado.sucesso,
        'resultado': resultado.para_dict(),
        'error': resultado.erro,
        'notificacoes': acumulado.notificacoes,
    })


# === Etapas do processo ===

@login_required
@require_POST
@ajax_requer_permissao(ImobiliariaPermissions.pode_gerenciar_etapas)
def criar_etapa(request):
    try:
        data = dados_requisicao(request)
        etapa = quadros.criar_etapa(RepositorioDjango(), data.get('titulo'), data.get('cor') or '#6B7280')
    except ValueError:
        return JsonResponse({'success': False, 'error': 'JSON inválido'}, status=400)
    except ValidationError as e:
        return JsonResponse({'success': False, 'error': _mensagem_validacao(e)}, status=400)
    except ErroPersistencia as e:
        return JsonResponse({'success': False, 'error': str(e)})

    return JsonResponse({'success': True, 'etapa': etapa, 'message': f"Etapa {etapa['titulo']} criada"})


@login_required
@require_POST
@ajax_requer_permissao(ImobiliariaPermissions.pode_gerenciar_etapas)
def renomear_etapa(request, etapa_id):
    try:
        data = dados_requisicao(request)
        etapa = quadros.renomear_etapa(RepositorioDjango(), etapa_id, data.get('titulo'))
    except ValueError:
        return JsonResponse({'success': False, 'error': 'JSON inválido'}, status=400)
    except ValidationError as e:
        return JsonResponse({'success': False, 'error': _mensagem_validacao(e)}, status=400)
    except ErroPersistencia as e:
        return JsonResponse({'success': False, 'error': str(e)})

    return JsonResponse({'success': True, 'etapa': etapa})


@login_required
@require_POST
@ajax_requer_permissao(ImobiliariaPermissions.pode_gerenciar_etapas)
def remover_etapa(request, etapa_id):
    """
    Remove etapa movendo vendas e tarefas para a primeira etapa padrão
    """
    try:
        # mover os itens e apagar a etapa: tudo ou nada
        with transaction.atomic():
            resumo = quadros.remover_etapa(RepositorioDjango(), etapa_id)
    except ValidationError as e:
        return JsonResponse({'success': False, 'error': _mensagem_validacao(e)}, status=400)
    except ErroPersistencia as e:
        logger.error(f"❌ Erro ao remover etapa {etapa_id}: {e}")
        return JsonResponse({'success': False, 'error': 'Erro ao remover etapa'})

    CacheColecoes().invalidar(quadros.COLECAO_ETAPAS)
    pedir_atualizacao(['tarefas', 'acompanhamento'], 'etapa_removida')
    return JsonResponse({'success': True, **resumo})


@login_required
@require_GET
def historico_tarefa(request, tarefa_id):
    """
    Histórico de alterações de uma tarefa
    """
    tarefa = get_object_or_404(TarefaCorretor.objects.select_related('corretor'), id=tarefa_id)

    if not ImobiliariaPermissions.is_gestor(request.user):
        corretor = getattr(request.user, 'corretor', None)
        if corretor is None or tarefa.corretor_id != corretor.id:
            return JsonResponse({'success': False, 'error': 'Sem acesso à tarefa'}, status=403)

    historico = [
        {
            'acao': registro.acao,
            'acao_display': registro.get_acao_display(),
            'valor_anterior': registro.valor_anterior,
            'valor_novo': registro.valor_novo,
            'usuario': (registro.usuario.get_full_name() or registro.usuario.username) if registro.usuario else None,
            'criado_em': timezone.localtime(registro.criado_em).isoformat(),
        }
        for registro in tarefa.historico.select_related('usuario')
    ]

    return JsonResponse({
        'success': True,
        'tarefa': tarefa.titulo,
        'historico': historico,
    })
