# apps/board/quadros.py

"""
Quadros Kanban da imobiliária

Cada quadro é uma coleção cujos itens pertencem a exatamente uma coluna
(bucket), guardada num único campo do registro:

- tarefas: tarefas dos corretores, coluna = etapa do processo
- acompanhamento: vendas, coluna = etapa do processo
- corretores (X1): corretores, coluna = StatusKanban

O conjunto de colunas de cada quadro é fechado e validado na entrada.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from django.core.exceptions import ValidationError

from apps.core.models import StatusKanban, TarefaCorretor
from apps.core.repositorio import RepositorioRecursos

logger = logging.getLogger(__name__)

COLECAO_ETAPAS = 'etapas'

Coluna = Dict


def colunas_etapas(repositorio: RepositorioRecursos) -> List[Coluna]:
    etapas = sorted(repositorio.listar(COLECAO_ETAPAS), key=lambda e: (e['ordem'], e['titulo']))
    return [
        {'valor': etapa['id'], 'titulo': etapa['titulo'], 'cor': etapa['cor'], 'padrao': etapa['padrao']}
        for etapa in etapas
    ]


def colunas_status_kanban(repositorio: RepositorioRecursos) -> List[Coluna]:
    cores = {
        StatusKanban.AGENDAR: '#EAB308',
        StatusKanban.EM_ANDAMENTO: '#3B82F6',
        StatusKanban.CONCLUIDO: '#22C55E',
    }
    return [
        {'valor': valor, 'titulo': rotulo, 'cor': cores[valor], 'padrao': True}
        for valor, rotulo in StatusKanban.choices
    ]


@dataclass(frozen=True)
class DefinicaoQuadro:
    """Como um quadro guarda e valida suas colunas"""

    nome: str
    titulo: str
    colecao: str
    campo_coluna: str
    carregar_colunas: Callable[[RepositorioRecursos], List[Coluna]]
    converter: Callable = str
    colecao_colunas: Optional[str] = None
    mensagem_sucesso: str = ''

    def converter_coluna(self, valor):
        """Converte o identificador recebido (ex: do JSON) para o tipo do campo"""
        try:
            return self.converter(valor)
        except (TypeError, ValueError):
            raise ValidationError(f"Coluna inválida para o quadro {self.nome}: {valor!r}")

    def validar_coluna(self, valor, colunas: List[Coluna]):
        """
        Garante que o valor pertence ao conjunto de colunas do quadro

        Raises:
            ValidationError: coluna desconhecida
        """
        valor = self.converter_coluna(valor)
        if valor not in {coluna['valor'] for coluna in colunas}:
            raise ValidationError(f"Coluna desconhecida no quadro {self.nome}: {valor!r}")
        return valor


QUADROS = {
    'tarefas': DefinicaoQuadro(
        nome='tarefas',
        titulo='Tarefas dos Corretores',
        colecao='tarefas',
        campo_coluna='coluna_id',
        carregar_colunas=colunas_etapas,
        converter=int,
        colecao_colunas=COLECAO_ETAPAS,
    ),
    'acompanhamento': DefinicaoQuadro(
        nome='acompanhamento',
        titulo='Acompanhamento de Vendas',
        colecao='vendas',
        campo_coluna='etapa_id',
        carregar_colunas=colunas_etapas,
        converter=int,
        colecao_colunas=COLECAO_ETAPAS,
    ),
    'corretores': DefinicaoQuadro(
        nome='corretores',
        titulo='X1 - Corretores',
        colecao='corretores',
        campo_coluna='status_kanban',
        carregar_colunas=colunas_status_kanban,
        converter=lambda valor: StatusKanban(valor).value,
        mensagem_sucesso='Status atualizado com sucesso',
    ),
}


def obter_definicao(nome: str) -> DefinicaoQuadro:
    try:
        return QUADROS[nome]
    except (KeyError, TypeError):
        raise ValidationError(f"Quadro desconhecido: {nome!r}")


# === Filtros e agrupamento ===

def filtrar_itens(itens: List[Dict], q: str = '', prioridade: str = '', corretor_id=None) -> List[Dict]:
    """Busca por texto (título, descrição, imóvel, cliente) e filtros de tarefa"""
    q = (q or '').strip().lower()
    resultado = []
    for item in itens:
        if q:
            textos = (
                item.get('titulo'), item.get('descricao'), item.get('referencia_imovel'),
                item.get('cliente'), item.get('imovel'), item.get('nome'),
            )
            if not any(q in texto.lower() for texto in textos if texto):
                continue
        if prioridade and item.get('prioridade') != prioridade:
            continue
        if corretor_id and str(item.get('corretor_id')) != str(corretor_id):
            continue
        resultado.append(item)
    return resultado


def agrupar_por_coluna(definicao: DefinicaoQuadro, colunas: List[Coluna], itens: List[Dict]) -> List[Dict]:
    """
    Distribui os itens pelas colunas, na ordem das colunas

    Itens sem coluna (ex: venda sem etapa) ficam de fora.
    """
    grupos = {coluna['valor']: [] for coluna in colunas}
    for item in itens:
        valor = item.get(definicao.campo_coluna)
        if valor in grupos:
            grupos[valor].append(item)

    return [
        dict(coluna, itens=grupos[coluna['valor']], total=len(grupos[coluna['valor']]))
        for coluna in colunas
    ]


def contagem_prioridades(itens: List[Dict]) -> Dict[str, int]:
    contagem = {valor: 0 for valor, _ in TarefaCorretor.PRIORIDADE_CHOICES}
    for item in itens:
        if item.get('prioridade') in contagem:
            contagem[item['prioridade']] += 1
    return contagem


# === Gestão de etapas ===

def _validar_titulo(titulo) -> str:
    titulo = (titulo or '').strip()
    if not titulo:
        raise ValidationError("Título da etapa é obrigatório")
    return titulo.upper()


def criar_etapa(repositorio: RepositorioRecursos, titulo, cor: str = '#6B7280') -> Dict:
    """Cria etapa no fim do processo"""
    titulo = _validar_titulo(titulo)
    etapas = repositorio.listar(COLECAO_ETAPAS)
    ordem = max((etapa['ordem'] for etapa in etapas), default=-1) + 1

    etapa = repositorio.criar(COLECAO_ETAPAS, {
        'titulo': titulo,
        'cor': cor or '#6B7280',
        'ordem': ordem,
        'padrao': False,
    })
    logger.info(f"➕ Etapa '{titulo}' criada na posição {ordem}")
    return etapa


def renomear_etapa(repositorio: RepositorioRecursos, etapa_id, titulo) -> Dict:
    titulo = _validar_titulo(titulo)
    etapa = repositorio.atualizar_por_id(COLECAO_ETAPAS, etapa_id, {'titulo': titulo})
    logger.info(f"✏️ Etapa {etapa_id} renomeada para '{titulo}'")
    return etapa


def remover_etapa(repositorio: RepositorioRecursos, etapa_id) -> Dict:
    """
    Remove uma etapa movendo vendas e tarefas para a primeira etapa padrão

    Returns:
        Resumo com a etapa de destino e quantos itens foram movidos

    Raises:
        ValidationError: etapa inexistente ou última etapa restante
        ErroPersistencia: falha ao mover itens ou remover a etapa
    """
    etapas = sorted(repositorio.listar(COLECAO_ETAPAS), key=lambda e: (e['ordem'], e['titulo']))
    etapa = next((e for e in etapas if e['id'] == etapa_id), None)
    if etapa is None:
        raise ValidationError(f"Etapa {etapa_id} não encontrada")

    restantes = [e for e in etapas if e['id'] != etapa_id]
    if not restantes:
        raise ValidationError("Não é possível remover a última etapa do processo")

    destino = next((e for e in restantes if e['padrao']), restantes[0])

    vendas = repositorio.listar('vendas', {'etapa_id': etapa_id})
    for venda in vendas:
        repositorio.atualizar_por_id('vendas', venda['id'], {'etapa_id': destino['id']})

    tarefas = repositorio.listar('tarefas', {'coluna_id': etapa_id})
    for tarefa in tarefas:
        repositorio.atualizar_por_id('tarefas', tarefa['id'], {'coluna_id': destino['id']})

    repositorio.remover_por_id(COLECAO_ETAPAS, etapa_id)

    logger.info(
        f"🗑️ Etapa '{etapa['titulo']}' removida - {len(vendas)} vendas e "
        f"{len(tarefas)} tarefas movidas para '{destino['titulo']}'"
    )
    return {
        'etapa_removida': etapa_id,
        'destino': destino['id'],
        'vendas_movidas': len(vendas),
        'tarefas_movidas': len(tarefas),
    }
