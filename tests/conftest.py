# tests/conftest.py

import uuid

import pytest
from django.core.cache import cache
from django.core.cache.backends.locmem import LocMemCache

from apps.core.cache import CacheColecoes
from apps.core.models import Corretor, EtapaProcesso, TarefaCorretor, Usuario
from .fakes import NotificadorFalso, RepositorioMemoria

ETAPAS = [
    {'id': 1, 'titulo': 'APROVAÇÃO', 'cor': '#EAB308', 'ordem': 0, 'padrao': True},
    {'id': 2, 'titulo': 'FORMULÁRIO', 'cor': '#3B82F6', 'ordem': 1, 'padrao': True},
    {'id': 3, 'titulo': 'FINALIZADO', 'cor': '#22C55E', 'ordem': 2, 'padrao': True},
]


@pytest.fixture(autouse=True)
def limpar_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def cache_colecoes():
    """Cache isolado por teste"""
    backend = LocMemCache(f'teste-{uuid.uuid4()}', {})
    yield CacheColecoes(backend=backend, timeout=300)
    backend.clear()


@pytest.fixture
def notificador():
    return NotificadorFalso()


@pytest.fixture
def repositorio():
    return RepositorioMemoria({
        'etapas': ETAPAS,
        'tarefas': [
            {'id': 10, 'titulo': 'Visita', 'coluna_id': 1, 'corretor_id': 1, 'prioridade': 'alta'},
            {'id': 11, 'titulo': 'Documentos', 'coluna_id': 2, 'corretor_id': 2, 'prioridade': 'media'},
        ],
        'corretores': [
            {'id': 1, 'nome': 'Ana', 'status': 'ativo', 'status_kanban': 'agendar'},
            {'id': 2, 'nome': 'Bruno', 'status': 'ativo', 'status_kanban': 'concluido'},
        ],
        'vendas': [
            {'id': 20, 'cliente': 'Maria', 'etapa_id': 2, 'status': 'confirmada'},
        ],
    })


# === Banco ===

@pytest.fixture
def etapas(db):
    return EtapaProcesso.criar_etapas_padrao()


@pytest.fixture
def gestor(db):
    return Usuario.objects.create_user('gestor', 'gestor@imobiliaria.local', 'senha-forte-123', tipo='gerente')


@pytest.fixture
def usuario_corretor(db):
    usuario = Usuario.objects.create_user('ana', 'ana@imobiliaria.local', 'senha-forte-123', tipo='corretor')
    Corretor.objects.create(nome='Ana Souza', email='ana@imobiliaria.local', usuario=usuario)
    return usuario


@pytest.fixture
def corretor(usuario_corretor):
    return usuario_corretor.corretor


@pytest.fixture
def outro_corretor(db):
    return Corretor.objects.create(nome='Bruno Lima', email='bruno@imobiliaria.local')


@pytest.fixture
def tarefa(etapas, corretor, gestor):
    return TarefaCorretor.objects.create(
        corretor=corretor,
        coluna=etapas[0],
        titulo='Visitar apartamento 101',
        prioridade='alta',
        criado_por=gestor,
    )


@pytest.fixture
def cliente_gestor(client, gestor):
    client.force_login(gestor)
    return client


@pytest.fixture
def cliente_corretor(client, usuario_corretor):
    client.force_login(usuario_corretor)
    return client
