# apps/metas/views.py

import logging

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import Http404, JsonResponse
from django.shortcuts import render
from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST

from apps.core.cache import CacheColecoes
from apps.core.notificacoes import (
    NotificadorAcumulado, NotificadorCanal, NotificadorComposto, NotificadorMensagens
)
from apps.core.permissions import ImobiliariaPermissions, ajax_requer_permissao
from apps.core.repositorio import ErroPersistencia, RepositorioDjango
from apps.core.utils import dados_requisicao, formatar_moeda_compacta, formatar_percentual
from . import indicadores
from .forms import MetaAnualForm, MetaContratacaoForm, validar_ano
from .progressao import calcular_progressao
from .services import carregar_metas_ano, meta_anual_salva, salvar_meta_anual

logger = logging.getLogger(__name__)


def _montar_painel(ano, meta_anual, repositorio, cache, meta_contratacao, hoje):
    """Reúne todos os blocos do painel Meta Gestão"""
    progressao = calcular_progressao(meta_anual)

    vendas = cache.obter(
        'vendas',
        lambda: repositorio.listar('vendas', {'status': 'confirmada'}),
        escopo='confirmadas'
    )
    corretores_ativos = len(cache.obter(
        'corretores',
        lambda: repositorio.listar('corretores', {'status': 'ativo'}),
        escopo='ativos'
    ))

    resumo = indicadores.resumo_anual(ano, vendas, meta_anual)
    meses = indicadores.detalhamento_mensal(ano, progressao, vendas, hoje)

    return {
        'ano': ano,
        'resumo': resumo,
        'progressao': progressao,
        'progresso_texto': formatar_percentual(resumo['progresso']),
        'progressao_texto': (
            f"{formatar_moeda_compacta(progressao[0])} (Jan) → "
            f"{formatar_moeda_compacta(progressao[-1])} (Dez)"
        ),
        'meses': meses,
        'desempenho': indicadores.estatisticas_desempenho(meses),
        'probabilidade': indicadores.probabilidade(meta_anual, resumo['total_vgv'], hoje, ano=ano),
        'contratacao': indicadores.meta_contratacao(meta_contratacao, corretores_ativos, hoje),
        'vgv_por_corretor': (resumo['total_vgv'] / corretores_ativos) if corretores_ativos else None,
    }


@login_required
@require_GET
def painel_metas(request, ano=None):
    """
    Painel Meta Gestão
    Meta anual (soma das metas mensais gravadas), progressão mensal,
    projeções e meta de contratação
    """
    hoje = timezone.localdate()
    ano = ano or hoje.year
    if not validar_ano(ano):
        raise Http404("Ano fora do intervalo permitido")

    form_contratacao = MetaContratacaoForm(request.GET)
    meta_contratacao = settings.IMOBILIARIA_META_CONTRATACAO_PADRAO
    if form_contratacao.is_valid() and form_contratacao.cleaned_data['meta_contratacao'] is not None:
        meta_contratacao = form_contratacao.cleaned_data['meta_contratacao']

    repositorio = RepositorioDjango()
    cache = CacheColecoes()
    quer_json = request.GET.get('formato') == 'json'

    try:
        metas = carregar_metas_ano(ano, repositorio, cache)
        painel = _montar_painel(ano, meta_anual_salva(metas), repositorio, cache, meta_contratacao, hoje)
    except ErroPersistencia as e:
        logger.error(f"❌ Erro ao carregar painel de metas {ano}: {e}")
        if quer_json:
            return JsonResponse({'success': False, 'error': 'Erro ao carregar metas'}, status=503)
        NotificadorMensagens(request).erro('Erro ao carregar metas', 'Tente novamente em instantes.')
        painel = None

    if quer_json:
        return JsonResponse({'success': True, 'painel': painel})

    context = {
        'title': f'Meta Gestão - {ano}',
        'ano': ano,
        'painel': painel,
        'form': MetaAnualForm(initial={'meta_anual': painel['resumo']['meta_anual'] if painel else 0}),
        'pode_gerenciar': ImobiliariaPermissions.pode_gerenciar_metas(request.user),
        'ano_anterior': ano - 1,
        'proximo_ano': ano + 1 if validar_ano(ano + 1) else None,
    }
    return render(request, 'metas/painel.html', context)


@login_required
@require_POST
@ajax_requer_permissao(ImobiliariaPermissions.pode_gerenciar_metas)
def salvar_metas(request, ano):
    """
    Distribui a meta anual em metas mensais crescentes e grava
    Só escreve os meses cujo valor mudou
    """
    if not validar_ano(ano):
        return JsonResponse({'success': False, 'error': 'Ano inválido'}, status=400)

    try:
        form = MetaAnualForm(dados_requisicao(request))
    except ValueError:
        return JsonResponse({'success': False, 'error': 'JSON inválido'}, status=400)

    if not form.is_valid():
        return JsonResponse({'success': False, 'errors': form.errors}, status=400)

    acumulado = NotificadorAcumulado()
    notificador = NotificadorComposto(acumulado, NotificadorCanal(request.user.id))
    meta_anual = form.cleaned_data['meta_anual']

    try:
        resultado = salvar_meta_anual(ano, meta_anual, RepositorioDjango(), notificador, CacheColecoes())
    except ErroPersistencia as e:
        logger.error(f"❌ Erro ao carregar metas existentes de {ano}: {e}")
        notificador.erro('Erro ao salvar metas', 'Não foi possível carregar as metas atuais.')
        return JsonResponse({
            'success': False,
            'error': 'Erro ao salvar metas',
            'notificacoes': acumulado.notificacoes
        })

    logger.info(f"👤 {request.user.username} salvou meta anual {ano}: {meta_anual}")

    return JsonResponse({
        'success': resultado.sucesso,
        'resultado': resultado.para_dict(),
        'meta_anual': meta_anual,
        'notificacoes': acumulado.notificacoes,
        'timestamp': timezone.now().isoformat()
    })


@login_required
@require_GET
def previa_progressao(request):
    """
    Prévia da progressão enquanto o gestor digita a meta anual
    Retorna parcial HTML para HTMX ou JSON
    """
    form = MetaAnualForm(request.GET)
    if not form.is_valid():
        return JsonResponse({'success': False, 'errors': form.errors}, status=400)

    progressao = calcular_progressao(form.cleaned_data['meta_anual'])
    meses = [
        {'mes': idx + 1, 'nome': indicadores.NOMES_MESES[idx], 'esperado': valor}
        for idx, valor in enumerate(progressao)
    ]

    if request.htmx:
        return render(request, 'metas/partials/progressao.html', {'meses': meses})

    return JsonResponse({'success': True, 'meses': meses})
