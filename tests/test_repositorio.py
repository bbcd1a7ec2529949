# tests/test_repositorio.py

from decimal import Decimal

import pytest

from apps.core.models import MetaMensal
from apps.core.repositorio import ErroPersistencia, RepositorioDjango

pytestmark = pytest.mark.django_db


@pytest.fixture
def repo():
    return RepositorioDjango()


def test_criar_devolve_registro(repo):
    registro = repo.criar('metas_mensais', {'ano': 2025, 'mes': 1, 'valor_meta': Decimal('1000.00')})

    assert registro['id']
    assert registro['ano'] == 2025
    assert registro['valor_meta'] == Decimal('1000.00')


def test_criar_mes_duplicado_falha(repo):
    repo.criar('metas_mensais', {'ano': 2025, 'mes': 1, 'valor_meta': Decimal('1')})

    with pytest.raises(ErroPersistencia):
        repo.criar('metas_mensais', {'ano': 2025, 'mes': 1, 'valor_meta': Decimal('2')})

    assert MetaMensal.objects.count() == 1


def test_criar_valor_invalido_falha(repo):
    with pytest.raises(ErroPersistencia):
        repo.criar('metas_mensais', {'ano': 2025, 'mes': 13, 'valor_meta': Decimal('1')})


def test_listar_com_filtro(repo):
    repo.criar('metas_mensais', {'ano': 2024, 'mes': 1, 'valor_meta': Decimal('1')})
    repo.criar('metas_mensais', {'ano': 2025, 'mes': 1, 'valor_meta': Decimal('2')})

    registros = repo.listar('metas_mensais', {'ano': 2025})

    assert [r['valor_meta'] for r in registros] == [Decimal('2.00')]


def test_listar_filtro_invalido(repo):
    with pytest.raises(ErroPersistencia):
        repo.listar('metas_mensais', {'campo_que_nao_existe': 1})


def test_atualizar_por_id(repo):
    registro = repo.criar('metas_mensais', {'ano': 2025, 'mes': 2, 'valor_meta': Decimal('1')})

    atualizado = repo.atualizar_por_id('metas_mensais', registro['id'], {'valor_meta': Decimal('5.50')})

    assert atualizado['valor_meta'] == Decimal('5.50')
    assert MetaMensal.objects.get(id=registro['id']).valor_meta == Decimal('5.50')


def test_atualizar_id_inexistente(repo):
    with pytest.raises(ErroPersistencia) as erro:
        repo.atualizar_por_id('metas_mensais', 999, {'valor_meta': Decimal('1')})

    assert erro.value.registro_id == 999


def test_atualizar_valor_negativo_nao_grava(repo):
    registro = repo.criar('metas_mensais', {'ano': 2025, 'mes': 3, 'valor_meta': Decimal('1')})

    with pytest.raises(ErroPersistencia):
        repo.atualizar_por_id('metas_mensais', registro['id'], {'valor_meta': Decimal('-1')})

    assert MetaMensal.objects.get(id=registro['id']).valor_meta == Decimal('1.00')


def test_remover_por_id(repo):
    registro = repo.criar('metas_mensais', {'ano': 2025, 'mes': 4, 'valor_meta': Decimal('1')})

    repo.remover_por_id('metas_mensais', registro['id'])

    assert not MetaMensal.objects.exists()
    with pytest.raises(ErroPersistencia):
        repo.remover_por_id('metas_mensais', registro['id'])


def test_colecao_desconhecida(repo):
    with pytest.raises(ErroPersistencia):
        repo.listar('imoveis')


def test_remover_etapa_com_tarefas_falha(repo, tarefa):
    with pytest.raises(ErroPersistencia):
        repo.remover_por_id('etapas', tarefa.coluna_id)
