# tests/test_reconciliacao.py

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from apps.core.utils import arredondar_centavos
from apps.metas.progressao import calcular_progressao
from apps.metas.services import (
    COLECAO_METAS, carregar_metas_ano, meta_anual_salva, reconciliar_e_persistir, salvar_meta_anual
)
from .fakes import RepositorioMemoria

ANO = 2025


def _metas_gravadas(repositorio):
    return repositorio.listar(COLECAO_METAS, {'ano': ANO})


def test_primeira_gravacao_cria_os_doze_meses(notificador):
    repositorio = RepositorioMemoria()
    progressao = calcular_progressao(Decimal('36000000'))

    resultado = reconciliar_e_persistir(ANO, progressao, [], repositorio, notificador)

    assert resultado.sucesso
    assert resultado.criados == list(range(1, 13))
    assert repositorio.total('criar') == 12
    assert repositorio.total('atualizar_por_id') == 0
    assert len(notificador.sucessos) == 1
    assert notificador.erros == []

    janeiro = next(m for m in _metas_gravadas(repositorio) if m['mes'] == 1)
    assert janeiro['valor_meta'] == Decimal('1000000.00')


def test_segunda_gravacao_nao_escreve_nada(notificador):
    repositorio = RepositorioMemoria()
    progressao = calcular_progressao(Decimal('12000000'))
    reconciliar_e_persistir(ANO, progressao, [], repositorio, notificador)
    chamadas_antes = len(repositorio.chamadas)

    resultado = reconciliar_e_persistir(ANO, progressao, _metas_gravadas(repositorio), repositorio, notificador)

    assert resultado.total_escritas == 0
    assert resultado.ignorados == list(range(1, 13))
    escritas = [c for c in repositorio.chamadas[chamadas_antes:] if c[0] in ('criar', 'atualizar_por_id')]
    assert escritas == []


def test_mesmas_metas_existentes_duas_vezes_nao_atualiza(notificador):
    progressao = calcular_progressao(Decimal('12000000'))
    existentes = [
        {'id': mes, 'ano': ANO, 'mes': mes, 'valor_meta': arredondar_centavos(valor)}
        for mes, valor in enumerate(progressao, start=1)
    ]
    repositorio = RepositorioMemoria({COLECAO_METAS: existentes})

    reconciliar_e_persistir(ANO, progressao, existentes, repositorio, notificador)
    reconciliar_e_persistir(ANO, progressao, existentes, repositorio, notificador)

    assert repositorio.total('atualizar_por_id') == 0
    assert repositorio.total('criar') == 0


def _existentes_com_janeiro(valor_janeiro):
    progressao = calcular_progressao(Decimal('36000000'))
    existentes = [
        {'id': mes, 'ano': ANO, 'mes': mes, 'valor_meta': arredondar_centavos(valor)}
        for mes, valor in enumerate(progressao, start=1)
    ]
    existentes[0]['valor_meta'] = valor_janeiro
    return progressao, existentes


def test_diferenca_dentro_da_tolerancia_nao_atualiza(notificador):
    progressao, existentes = _existentes_com_janeiro(Decimal('1000000.01'))
    repositorio = RepositorioMemoria({COLECAO_METAS: existentes})

    resultado = reconciliar_e_persistir(ANO, progressao, existentes, repositorio, notificador)

    assert repositorio.total('atualizar_por_id') == 0
    assert 1 in resultado.ignorados


def test_diferenca_acima_da_tolerancia_atualiza_uma_vez(notificador):
    progressao, existentes = _existentes_com_janeiro(Decimal('1000000.02'))
    repositorio = RepositorioMemoria({COLECAO_METAS: existentes})

    resultado = reconciliar_e_persistir(ANO, progressao, existentes, repositorio, notificador)

    assert resultado.atualizados == [1]
    atualizacoes = [c for c in repositorio.chamadas if c[0] == 'atualizar_por_id']
    assert atualizacoes == [('atualizar_por_id', COLECAO_METAS, (1, {'valor_meta': Decimal('1000000.00')}))]


def test_tolerancia_configuravel(notificador):
    progressao, existentes = _existentes_com_janeiro(Decimal('1000000.50'))
    repositorio = RepositorioMemoria({COLECAO_METAS: existentes})

    reconciliar_e_persistir(ANO, progressao, existentes, repositorio, notificador, tolerancia=Decimal('1'))

    assert repositorio.total('atualizar_por_id') == 0


def test_meta_zero_sem_metas_gravadas_nao_cria(notificador):
    repositorio = RepositorioMemoria()

    resultado = reconciliar_e_persistir(ANO, calcular_progressao(0), [], repositorio, notificador)

    assert resultado.sucesso
    assert repositorio.total('criar') == 0
    assert resultado.ignorados == list(range(1, 13))


def test_meta_zero_zera_metas_gravadas(notificador):
    existentes = [{'id': mes, 'ano': ANO, 'mes': mes, 'valor_meta': Decimal('100.00')} for mes in range(1, 13)]
    repositorio = RepositorioMemoria({COLECAO_METAS: existentes})

    resultado = reconciliar_e_persistir(ANO, calcular_progressao(0), existentes, repositorio, notificador)

    assert resultado.atualizados == list(range(1, 13))
    assert meta_anual_salva(_metas_gravadas(repositorio)) == Decimal('0')


def test_metas_de_outro_ano_sao_ignoradas(notificador):
    existentes = [{'id': 1, 'ano': ANO - 1, 'mes': 1, 'valor_meta': Decimal('5')}]
    repositorio = RepositorioMemoria({COLECAO_METAS: existentes})

    resultado = reconciliar_e_persistir(ANO, calcular_progressao(Decimal('36')), existentes, repositorio, notificador)

    assert resultado.criados == list(range(1, 13))
    assert repositorio.total('atualizar_por_id') == 0


def test_falha_interrompe_os_meses_seguintes(notificador):
    repositorio = RepositorioMemoria()
    repositorio.falhar('criar', a_partir_de=3)

    resultado = reconciliar_e_persistir(ANO, calcular_progressao(Decimal('36000000')), [], repositorio, notificador)

    assert not resultado.sucesso
    assert resultado.criados == [1, 2]
    assert resultado.mes_com_erro == 3
    assert repositorio.total('criar') == 3
    assert len(_metas_gravadas(repositorio)) == 2
    assert len(notificador.erros) == 1
    assert notificador.sucessos == []


def test_progressao_incompleta_e_recusada(notificador):
    with pytest.raises(ValueError):
        reconciliar_e_persistir(ANO, [Decimal('1')] * 11, [], RepositorioMemoria(), notificador)


def test_salvar_meta_anual_atualiza_cache(notificador, cache_colecoes):
    repositorio = RepositorioMemoria()
    assert carregar_metas_ano(ANO, repositorio, cache_colecoes) == []

    resultado = salvar_meta_anual(ANO, '36000000', repositorio, notificador, cache_colecoes)

    assert resultado.sucesso
    metas = carregar_metas_ano(ANO, repositorio, cache_colecoes)
    assert len(metas) == 12
    assert abs(meta_anual_salva(metas) - Decimal('36000000')) <= Decimal('0.06')


def test_salvar_meta_negativa_nao_chama_repositorio(notificador, cache_colecoes):
    repositorio = RepositorioMemoria()

    with pytest.raises(ValidationError):
        salvar_meta_anual(ANO, '-10', repositorio, notificador, cache_colecoes)

    assert repositorio.chamadas == []
    assert notificador.notificacoes == []
