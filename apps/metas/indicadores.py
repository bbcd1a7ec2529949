# apps/metas/indicadores.py

"""
Indicadores do painel Meta Gestão

Funções puras sobre listas de registros (dicionários) de vendas; não
acessam o banco.
"""

import math
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional

from .progressao import MESES_NO_ANO

NOMES_MESES = [
    'Janeiro', 'Fevereiro', 'Março', 'Abril', 'Maio', 'Junho',
    'Julho', 'Agosto', 'Setembro', 'Outubro', 'Novembro', 'Dezembro',
]

# Cenários de projeção
FATOR_MAIS_CORRETORES = Decimal('1.15')
FATOR_TICKET_MAIOR = Decimal('1.20')

ZERO = Decimal('0')
CEM = Decimal('100')


def _inteiro(valor: Decimal) -> int:
    return int(valor.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def _data_venda(venda: Dict) -> Optional[date]:
    data = venda.get('data_venda') or venda.get('criado_em')
    if data is None:
        return None
    return data.date() if hasattr(data, 'date') and callable(data.date) else data


def vendas_confirmadas_do_ano(ano: int, vendas: Iterable[Dict]) -> List[Dict]:
    confirmadas = []
    for venda in vendas:
        data = _data_venda(venda)
        if venda.get('status') == 'confirmada' and data is not None and data.year == ano:
            confirmadas.append(venda)
    return confirmadas


def indicador_status(percentual) -> Dict:
    """Classifica o percentual atingido de uma meta"""
    percentual = Decimal(str(percentual))
    if percentual >= 90:
        return {'codigo': 'dentro_meta', 'rotulo': 'Dentro da meta'}
    if percentual >= 50:
        return {'codigo': 'atencao', 'rotulo': 'Atenção'}
    return {'codigo': 'abaixo', 'rotulo': 'Abaixo do esperado'}


def rotulo_risco(percentual) -> str:
    percentual = Decimal(str(percentual))
    if percentual >= 100:
        return '🏆 Meta Atingida!'
    if percentual >= 90:
        return '🟢 Excelente!'
    if percentual >= 50:
        return '🟡 Atenção'
    return '🔴 Precisa Acelerar'


def resumo_anual(ano: int, vendas: Iterable[Dict], meta_anual: Decimal) -> Dict:
    """Totais de vendas confirmadas no ano frente à meta anual"""
    confirmadas = vendas_confirmadas_do_ano(ano, vendas)

    total_vgv = sum((Decimal(str(v.get('vgv') or 0)) for v in confirmadas), ZERO)
    total_vgc = sum((Decimal(str(v.get('vgc') or 0)) for v in confirmadas), ZERO)
    total_vendas = len(confirmadas)

    progresso = (total_vgv / meta_anual * CEM) if meta_anual > 0 else ZERO

    return {
        'ano': ano,
        'meta_anual': meta_anual,
        'total_vgv': total_vgv,
        'total_vgc': total_vgc,
        'total_vendas': total_vendas,
        'ticket_medio': (total_vgv / total_vendas) if total_vendas else ZERO,
        'falta_para_meta': max(ZERO, meta_anual - total_vgv),
        'progresso': progresso,
        'status': indicador_status(progresso),
        'rotulo_risco': rotulo_risco(progresso),
    }


def detalhamento_mensal(ano: int, progressao: List[Decimal], vendas: Iterable[Dict], hoje: Optional[date] = None) -> List[Dict]:
    """Meta esperada x realizado, mês a mês"""
    hoje = hoje or date.today()
    realizado_por_mes = [ZERO] * MESES_NO_ANO

    for venda in vendas_confirmadas_do_ano(ano, vendas):
        data = _data_venda(venda)
        realizado_por_mes[data.month - 1] += Decimal(str(venda.get('vgv') or 0))

    meses = []
    for idx in range(MESES_NO_ANO):
        esperado = progressao[idx] if idx < len(progressao) else ZERO
        realizado = realizado_por_mes[idx]
        percentual = (realizado / esperado * CEM) if esperado > 0 else ZERO

        meses.append({
            'mes': idx + 1,
            'nome': NOMES_MESES[idx],
            'esperado': esperado,
            'realizado': realizado,
            'diferenca': realizado - esperado,
            'percentual': percentual,
            'status': indicador_status(percentual),
            'mes_atual': hoje.year == ano and hoje.month == idx + 1,
        })

    return meses


def estatisticas_desempenho(meses: List[Dict]) -> Optional[Dict]:
    """
    Melhor e pior mês e crescimento médio mês a mês

    Considera apenas meses com meta ou realizado.
    """
    ativos = [m for m in meses if m['realizado'] > 0 or m['esperado'] > 0]
    if not ativos:
        return None

    melhor = ativos[0]
    pior = ativos[0]
    for mes in ativos[1:]:
        if mes['realizado'] > melhor['realizado']:
            melhor = mes
        if mes['realizado'] < pior['realizado']:
            pior = mes

    crescimentos = []
    for anterior, atual in zip(ativos, ativos[1:]):
        if anterior['realizado'] > 0:
            crescimentos.append((atual['realizado'] - anterior['realizado']) / anterior['realizado'] * CEM)

    crescimento_medio = sum(crescimentos, ZERO) / len(crescimentos) if crescimentos else ZERO

    return {
        'melhor_mes': melhor,
        'pior_mes': pior,
        'crescimento_medio': crescimento_medio,
    }


def probabilidade(
    meta_anual: Decimal, total_vgv: Decimal, hoje: Optional[date] = None, ano: Optional[int] = None
) -> Dict:
    """
    Probabilidade de atingir a meta mantendo o ritmo atual

    No ano corrente o realizado é projetado para o ano inteiro pela fração
    de meses já decorridos (incluindo o atual). Ano passado usa o realizado
    do ano todo; ano futuro ainda não tem ritmo. Os cenários aplicam fatores fixos.
    """
    hoje = hoje or date.today()
    ano = ano or hoje.year

    if meta_anual <= 0 or ano > hoje.year:
        return {'atual': 0, 'com_mais_corretores': 0, 'com_ticket_maior': 0}

    fracao_ano = Decimal(hoje.month) / MESES_NO_ANO if ano == hoje.year else Decimal(1)
    projetado = total_vgv / fracao_ano
    base = min(CEM, projetado / meta_anual * CEM)

    return {
        'atual': _inteiro(base),
        'com_mais_corretores': _inteiro(min(CEM, base * FATOR_MAIS_CORRETORES)),
        'com_ticket_maior': _inteiro(min(CEM, base * FATOR_TICKET_MAIOR)),
    }


def meta_contratacao(meta: int, corretores_ativos: int, hoje: Optional[date] = None) -> Dict:
    """Progresso da meta de contratação de corretores e ritmo necessário"""
    hoje = hoje or date.today()
    faltam = max(0, meta - corretores_ativos)
    meses_restantes = max(1, MESES_NO_ANO - (hoje.month - 1))
    percentual = _inteiro(Decimal(corretores_ativos) / meta * CEM) if meta > 0 else 0

    return {
        'meta': meta,
        'ativos': corretores_ativos,
        'faltam': faltam,
        'percentual': percentual,
        'percentual_barra': min(percentual, 100),
        'contratacoes_por_mes': math.ceil(faltam / meses_restantes),
    }
