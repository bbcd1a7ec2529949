# tests/test_views.py

import json
from decimal import Decimal

import pytest
from django.urls import reverse

from apps.core.models import Corretor, EtapaProcesso, HistoricoTarefa, MetaMensal, TarefaCorretor
from apps.core.repositorio import ErroPersistencia, RepositorioDjango

pytestmark = pytest.mark.django_db

ANO = 2025


def _post_json(client, url, dados):
    return client.post(url, data=json.dumps(dados), content_type='application/json')


# === Metas ===

def test_painel_exige_login(client):
    response = client.get(reverse('metas:painel', kwargs={'ano': ANO}))
    assert response.status_code == 302


def test_painel_json(cliente_gestor):
    MetaMensal.objects.create(ano=ANO, mes=1, valor_meta=Decimal('1000.00'))

    response = cliente_gestor.get(reverse('metas:painel', kwargs={'ano': ANO}), {'formato': 'json'})

    assert response.status_code == 200
    painel = response.json()['painel']
    assert Decimal(painel['resumo']['meta_anual']) == Decimal('1000.00')
    assert len(painel['progressao']) == 12
    assert painel['contratacao']['meta'] == 25


def test_painel_html(cliente_gestor):
    response = cliente_gestor.get(reverse('metas:painel', kwargs={'ano': ANO}))

    assert response.status_code == 200
    assert 'Meta Gestão - 2025' in response.content.decode()


def test_painel_ano_fora_do_intervalo(cliente_gestor):
    response = cliente_gestor.get(reverse('metas:painel', kwargs={'ano': 1990}))
    assert response.status_code == 404


def test_salvar_metas(cliente_gestor):
    response = _post_json(cliente_gestor, reverse('metas:salvar', kwargs={'ano': ANO}), {'meta_anual': '36000000'})

    assert response.status_code == 200
    dados = response.json()
    assert dados['success'] is True
    assert dados['resultado']['criados'] == list(range(1, 13))
    assert dados['notificacoes'][0]['tipo'] == 'success'
    assert MetaMensal.objects.filter(ano=ANO).count() == 12
    assert MetaMensal.objects.get(ano=ANO, mes=1).valor_meta == Decimal('1000000.00')


def test_salvar_metas_novamente_nao_escreve(cliente_gestor):
    url = reverse('metas:salvar', kwargs={'ano': ANO})
    _post_json(cliente_gestor, url, {'meta_anual': '36000000'})

    dados = _post_json(cliente_gestor, url, {'meta_anual': '36000000'}).json()

    assert dados['resultado']['criados'] == []
    assert dados['resultado']['atualizados'] == []


def test_salvar_metas_por_formulario(cliente_gestor):
    response = cliente_gestor.post(reverse('metas:salvar', kwargs={'ano': ANO}), {'meta_anual': '12000000'})

    assert response.json()['success'] is True
    assert MetaMensal.objects.get(ano=ANO, mes=1).valor_meta == Decimal('333333.33')


def test_salvar_meta_negativa(cliente_gestor):
    response = _post_json(cliente_gestor, reverse('metas:salvar', kwargs={'ano': ANO}), {'meta_anual': '-5'})

    assert response.status_code == 400
    assert not MetaMensal.objects.exists()


def test_salvar_metas_com_json_que_nao_e_objeto(cliente_gestor):
    response = cliente_gestor.post(
        reverse('metas:salvar', kwargs={'ano': ANO}), data='[1]', content_type='application/json'
    )

    assert response.status_code == 400
    assert not MetaMensal.objects.exists()


def test_corretor_nao_salva_metas(cliente_corretor):
    response = _post_json(cliente_corretor, reverse('metas:salvar', kwargs={'ano': ANO}), {'meta_anual': '100'})

    assert response.status_code == 403
    assert not MetaMensal.objects.exists()


def test_previa_progressao(cliente_gestor):
    response = cliente_gestor.get(reverse('metas:previa_progressao'), {'meta_anual': '36000000'})

    meses = response.json()['meses']
    assert len(meses) == 12
    assert Decimal(meses[0]['esperado']) == Decimal('1000000')


def test_previa_progressao_htmx(cliente_gestor):
    response = cliente_gestor.get(
        reverse('metas:previa_progressao'), {'meta_anual': '36000000'}, HTTP_HX_REQUEST='true'
    )

    assert response.status_code == 200
    assert 'Janeiro' in response.content.decode()


# === Quadros ===

def test_quadro_json(cliente_gestor, tarefa, etapas):
    response = cliente_gestor.get(reverse('board:kanban', kwargs={'quadro': 'tarefas'}), {'formato': 'json'})

    colunas = response.json()['colunas']
    assert len(colunas) == len(etapas)
    assert [item['id'] for item in colunas[0]['itens']] == [tarefa.id]


def test_quadro_html_e_parcial_htmx(cliente_gestor, tarefa):
    url = reverse('board:kanban', kwargs={'quadro': 'tarefas'})

    completo = cliente_gestor.get(url)
    parcial = cliente_gestor.get(url, {'q': 'visitar'}, HTTP_HX_REQUEST='true')

    assert completo.status_code == 200
    assert 'Tarefas dos Corretores' in completo.content.decode()
    assert parcial.status_code == 200
    assert 'Visitar apartamento 101' in parcial.content.decode()
    assert '<html' not in parcial.content.decode()


def test_pagina_do_quadro_conecta_tempo_real_e_mostra_notificacoes(cliente_gestor, tarefa):
    html = cliente_gestor.get(reverse('board:kanban', kwargs={'quadro': 'tarefas'})).content.decode()

    assert "abrirWebSocket('/ws/notifications/')" in html
    assert 'abrirWebSocket(`/ws/board/${quadro}/`)' in html
    assert 'resposta.notificacoes' in html
    assert 'mostrarNotificacao(' in html
    # falha de rede ou resposta não-JSON também devolve o card
    assert 'catch (erro)' in html
    assert 'htmx:afterSwap' in html


def test_quadro_desconhecido(cliente_gestor):
    response = cliente_gestor.get(reverse('board:kanban', kwargs={'quadro': 'financeiro'}))
    assert response.status_code == 404


def test_corretor_ve_apenas_as_proprias_tarefas(cliente_corretor, tarefa, outro_corretor, etapas):
    TarefaCorretor.objects.create(corretor=outro_corretor, coluna=etapas[0], titulo='Tarefa do Bruno')

    response = cliente_corretor.get(reverse('board:kanban', kwargs={'quadro': 'tarefas'}), {'formato': 'json'})

    assert response.json()['total'] == 1


def test_mover_tarefa(cliente_gestor, tarefa, etapas):
    response = _post_json(cliente_gestor, reverse('board:mover_item'), {
        'quadro': 'tarefas', 'item_id': tarefa.id, 'origem': etapas[0].id, 'destino': etapas[1].id,
    })

    assert response.status_code == 200
    assert response.json()['success'] is True
    tarefa.refresh_from_db()
    assert tarefa.coluna_id == etapas[1].id
    assert HistoricoTarefa.objects.filter(tarefa=tarefa, acao='movida').count() == 1


def test_mover_para_mesma_coluna(cliente_gestor, tarefa, etapas):
    response = _post_json(cliente_gestor, reverse('board:mover_item'), {
        'quadro': 'tarefas', 'item_id': tarefa.id, 'origem': etapas[0].id, 'destino': etapas[0].id,
    })

    assert response.json()['resultado']['status'] == 'ignorado'
    assert not HistoricoTarefa.objects.filter(tarefa=tarefa, acao='movida').exists()


def test_mover_para_coluna_desconhecida(cliente_gestor, tarefa, etapas):
    response = _post_json(cliente_gestor, reverse('board:mover_item'), {
        'quadro': 'tarefas', 'item_id': tarefa.id, 'origem': etapas[0].id, 'destino': 9999,
    })

    assert response.status_code == 400
    tarefa.refresh_from_db()
    assert tarefa.coluna_id == etapas[0].id


def test_mover_em_quadro_desconhecido(cliente_gestor, tarefa):
    response = _post_json(cliente_gestor, reverse('board:mover_item'), {
        'quadro': 'financeiro', 'item_id': tarefa.id, 'destino': 1,
    })
    assert response.status_code == 400


def test_corretor_move_a_propria_tarefa(cliente_corretor, tarefa, etapas):
    response = _post_json(cliente_corretor, reverse('board:mover_item'), {
        'quadro': 'tarefas', 'item_id': tarefa.id, 'origem': etapas[0].id, 'destino': etapas[1].id,
    })

    assert response.json()['success'] is True


def test_corretor_nao_move_tarefa_alheia(cliente_corretor, outro_corretor, etapas):
    alheia = TarefaCorretor.objects.create(corretor=outro_corretor, coluna=etapas[0], titulo='Tarefa do Bruno')

    response = _post_json(cliente_corretor, reverse('board:mover_item'), {
        'quadro': 'tarefas', 'item_id': alheia.id, 'origem': etapas[0].id, 'destino': etapas[1].id,
    })

    assert response.status_code == 403
    alheia.refresh_from_db()
    assert alheia.coluna_id == etapas[0].id


def test_mover_status_x1(cliente_gestor, outro_corretor):
    response = _post_json(cliente_gestor, reverse('board:mover_item'), {
        'quadro': 'corretores', 'item_id': outro_corretor.id, 'origem': 'agendar', 'destino': 'concluido',
    })

    dados = response.json()
    assert dados['success'] is True
    assert dados['notificacoes'][0]['tipo'] == 'success'
    assert Corretor.objects.get(id=outro_corretor.id).status_kanban == 'concluido'


def test_json_invalido(cliente_gestor):
    response = cliente_gestor.post(reverse('board:mover_item'), data='{nao e json', content_type='application/json')
    assert response.status_code == 400


@pytest.mark.parametrize('corpo', ['[1]', '"tarefas"', '3'])
def test_json_que_nao_e_objeto(cliente_gestor, tarefa, etapas, corpo):
    response = cliente_gestor.post(reverse('board:mover_item'), data=corpo, content_type='application/json')

    assert response.status_code == 400
    assert response.json()['success'] is False
    tarefa.refresh_from_db()
    assert tarefa.coluna_id == etapas[0].id


def test_quadro_em_formato_invalido(cliente_gestor, tarefa, etapas):
    response = _post_json(cliente_gestor, reverse('board:mover_item'), {
        'quadro': ['tarefas'], 'item_id': tarefa.id, 'destino': etapas[1].id,
    })
    assert response.status_code == 400


# === Etapas ===

def test_criar_etapa(cliente_gestor, etapas):
    response = _post_json(cliente_gestor, reverse('board:criar_etapa'), {'titulo': 'Vistoria'})

    etapa = response.json()['etapa']
    assert etapa['titulo'] == 'VISTORIA'
    assert etapa['ordem'] == len(etapas)


def test_renomear_etapa(cliente_gestor, etapas):
    response = _post_json(
        cliente_gestor, reverse('board:renomear_etapa', kwargs={'etapa_id': etapas[1].id}), {'titulo': 'Avaliação'}
    )

    assert response.json()['etapa']['titulo'] == 'AVALIAÇÃO'


def test_remover_etapa(cliente_gestor, tarefa, etapas):
    response = cliente_gestor.post(reverse('board:remover_etapa', kwargs={'etapa_id': etapas[0].id}))

    dados = response.json()
    assert dados['success'] is True
    assert dados['tarefas_movidas'] == 1
    tarefa.refresh_from_db()
    assert tarefa.coluna_id == etapas[1].id


def test_falha_ao_remover_etapa_desfaz_a_migracao_dos_itens(cliente_gestor, tarefa, etapas, monkeypatch):
    def remover_com_falha(self, colecao, registro_id):
        raise ErroPersistencia('Banco indisponível', colecao=colecao, registro_id=registro_id)

    monkeypatch.setattr(RepositorioDjango, 'remover_por_id', remover_com_falha)

    response = cliente_gestor.post(reverse('board:remover_etapa', kwargs={'etapa_id': etapas[0].id}))

    assert response.json()['success'] is False
    tarefa.refresh_from_db()
    assert tarefa.coluna_id == etapas[0].id
    assert EtapaProcesso.objects.filter(id=etapas[0].id).exists()


def test_corretor_nao_remove_etapa(cliente_corretor, etapas):
    response = cliente_corretor.post(reverse('board:remover_etapa', kwargs={'etapa_id': etapas[0].id}))
    assert response.status_code == 403


def test_historico_tarefa(cliente_corretor, tarefa):
    response = cliente_corretor.get(reverse('board:historico_tarefa', kwargs={'tarefa_id': tarefa.id}))

    historico = response.json()['historico']
    assert [h['acao'] for h in historico] == ['criada']


# === Monitoramento ===

def test_health_check(client):
    response = client.get(reverse('core:health'))

    assert response.status_code == 200
    assert response.json()['status'] == 'healthy'
