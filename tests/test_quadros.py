# tests/test_quadros.py

import pytest
from django.core.exceptions import ValidationError

from apps.board import quadros
from apps.core.models import EtapaProcesso, TarefaCorretor, Venda
from apps.core.repositorio import RepositorioDjango


def test_obter_definicao_desconhecida():
    with pytest.raises(ValidationError):
        quadros.obter_definicao('financeiro')


def test_filtrar_por_texto_prioridade_e_corretor(repositorio):
    itens = repositorio.colecoes['tarefas']

    assert [i['id'] for i in quadros.filtrar_itens(itens, q='visi')] == [10]
    assert [i['id'] for i in quadros.filtrar_itens(itens, prioridade='media')] == [11]
    assert [i['id'] for i in quadros.filtrar_itens(itens, corretor_id='2')] == [11]
    assert quadros.filtrar_itens(itens, q='inexistente') == []


def test_contagem_prioridades(repositorio):
    contagem = quadros.contagem_prioridades(repositorio.colecoes['tarefas'])
    assert contagem == {'baixa': 0, 'media': 1, 'alta': 1}


def test_criar_etapa_vai_para_o_fim(repositorio):
    etapa = quadros.criar_etapa(repositorio, '  vistoria ', '#000000')

    assert etapa['titulo'] == 'VISTORIA'
    assert etapa['ordem'] == 3
    assert etapa['padrao'] is False


def test_criar_etapa_sem_titulo(repositorio):
    with pytest.raises(ValidationError):
        quadros.criar_etapa(repositorio, '   ')
    assert repositorio.total('criar') == 0


def test_renomear_etapa(repositorio):
    etapa = quadros.renomear_etapa(repositorio, 2, 'documentação')
    assert etapa['titulo'] == 'DOCUMENTAÇÃO'


def test_remover_etapa_move_itens_para_primeira_padrao(repositorio):
    resumo = quadros.remover_etapa(repositorio, 2)

    assert resumo == {'etapa_removida': 2, 'destino': 1, 'vendas_movidas': 1, 'tarefas_movidas': 1}
    assert [e['id'] for e in repositorio.colecoes['etapas']] == [1, 3]
    assert repositorio.colecoes['vendas'][0]['etapa_id'] == 1
    assert all(t['coluna_id'] != 2 for t in repositorio.colecoes['tarefas'])


def test_remover_primeira_etapa_usa_a_seguinte(repositorio):
    resumo = quadros.remover_etapa(repositorio, 1)

    assert resumo['destino'] == 2
    tarefa = next(t for t in repositorio.colecoes['tarefas'] if t['id'] == 10)
    assert tarefa['coluna_id'] == 2


def test_nao_remove_ultima_etapa(repositorio):
    repositorio.colecoes['etapas'] = [repositorio.colecoes['etapas'][0]]

    with pytest.raises(ValidationError):
        quadros.remover_etapa(repositorio, 1)

    assert repositorio.total('remover_por_id') == 0


def test_remover_etapa_inexistente(repositorio):
    with pytest.raises(ValidationError):
        quadros.remover_etapa(repositorio, 42)


@pytest.mark.django_db
def test_remover_etapa_no_banco(etapas, corretor):
    formulario = etapas[2]
    tarefa = TarefaCorretor.objects.create(corretor=corretor, coluna=formulario, titulo='Assinar formulário')
    venda = Venda.objects.create(cliente='João', vgv=300000, etapa=formulario)

    quadros.remover_etapa(RepositorioDjango(), formulario.id)

    assert not EtapaProcesso.objects.filter(id=formulario.id).exists()
    tarefa.refresh_from_db()
    venda.refresh_from_db()
    assert tarefa.coluna_id == etapas[0].id
    assert venda.etapa_id == etapas[0].id
