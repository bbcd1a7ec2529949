# apps/board/movimentacao.py

"""
Movimentação otimista de itens entre colunas

O item muda de coluna na coleção em memória antes da gravação. Se a
gravação falhar, a mudança é desfeita (compensação) e o usuário recebe uma
notificação de erro. Só a coluna é gravada; a posição dentro da coluna não.

    aplicar -> atualizar_por_id -> confirmar
                                \\-> compensar (ErroPersistencia)
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from apps.core.cache import CacheColecoes
from apps.core.notificacoes import Notificador
from apps.core.repositorio import ErroPersistencia, RepositorioRecursos
from .quadros import DefinicaoQuadro, agrupar_por_coluna

logger = logging.getLogger(__name__)


class StatusMovimento(models.TextChoices):
    MOVIDO = 'movido', 'Movido'
    IGNORADO = 'ignorado', 'Ignorado'
    REVERTIDO = 'revertido', 'Revertido'


@dataclass
class ResultadoMovimento:
    status: str
    item_id: object = None
    origem: object = None
    destino: object = None
    item: Optional[Dict] = None
    erro: Optional[str] = None

    @property
    def sucesso(self):
        return self.status != StatusMovimento.REVERTIDO

    def para_dict(self) -> Dict:
        return {
            'status': self.status,
            'item_id': self.item_id,
            'origem': self.origem,
            'destino': self.destino,
            'erro': self.erro,
        }


class QuadroOtimista:
    """
    Coleção em memória de um quadro com movimentação otimista

    Os colaboradores (repositório, notificador, cache) são recebidos
    prontos; nada aqui acessa o banco diretamente.
    """

    ESCOPO = 'quadro'

    def __init__(
        self,
        definicao: DefinicaoQuadro,
        repositorio: RepositorioRecursos,
        notificador: Notificador,
        cache: CacheColecoes,
        recarregar: Optional[bool] = None,
    ):
        self.definicao = definicao
        self.repositorio = repositorio
        self.notificador = notificador
        self.cache = cache
        self.recarregar = (
            recarregar if recarregar is not None
            else getattr(settings, 'IMOBILIARIA_RECARREGAR_APOS_MOVER', True)
        )
        self.itens: List[Dict] = []
        self.colunas: List[Dict] = []
        self.carregar()

    # === Carga ===

    def carregar(self):
        """Lê itens e colunas pelo cache de coleções"""
        colecao = self.definicao.colecao
        registros = self.cache.obter(
            colecao,
            lambda: self.repositorio.listar(colecao),
            escopo=self.ESCOPO
        )
        if self.definicao.colecao_colunas:
            colunas = self.cache.obter(
                self.definicao.colecao_colunas,
                lambda: self.definicao.carregar_colunas(self.repositorio),
                escopo=f'colunas:{self.definicao.nome}'
            )
        else:
            colunas = self.definicao.carregar_colunas(self.repositorio)

        # só troca o estado em memória com as duas leituras feitas
        # cópias: a coleção em memória é alterada no lugar
        self.itens = [dict(registro) for registro in registros]
        self.colunas = colunas

    def item(self, item_id) -> Optional[Dict]:
        return next((item for item in self.itens if str(item['id']) == str(item_id)), None)

    def coluna_de(self, item_id):
        item = self.item(item_id)
        return item.get(self.definicao.campo_coluna) if item else None

    def agrupado(self, itens: Optional[List[Dict]] = None) -> List[Dict]:
        return agrupar_por_coluna(self.definicao, self.colunas, self.itens if itens is None else itens)

    # === Movimentação ===

    def mover(self, item_id, origem, destino) -> ResultadoMovimento:
        """
        Move o item para a coluna de destino

        - sem destino ou destino igual à origem: nada acontece
          (a origem é a informada pelo cliente, mesmo que o item esteja
          em outra coluna na memória; o card voltou para onde estava na tela)
        - destino fora do quadro: ValidationError, nenhuma gravação
        - gravação com falha: item volta para a coluna anterior
        - recarga após gravar com falha: o movimento vale, usa o registro gravado

        Raises:
            ValidationError: coluna ou item desconhecido
        """
        if destino is None or destino == '':
            return ResultadoMovimento(StatusMovimento.IGNORADO, item_id=item_id, origem=origem)

        destino = self.definicao.validar_coluna(destino, self.colunas)
        if origem is not None and origem != '':
            origem = self.definicao.converter_coluna(origem)

        if destino == origem:
            return ResultadoMovimento(StatusMovimento.IGNORADO, item_id=item_id, origem=origem, destino=destino)

        item = self.item(item_id)
        if item is None:
            raise ValidationError(f"Item {item_id} não encontrado no quadro {self.definicao.nome}")

        anterior = self.aplicar(item, destino)

        try:
            registro = self.repositorio.atualizar_por_id(
                self.definicao.colecao,
                item['id'],
                {self.definicao.campo_coluna: destino}
            )
        except ErroPersistencia as e:
            self.compensar(item, anterior, e)
            return ResultadoMovimento(
                StatusMovimento.REVERTIDO,
                item_id=item['id'],
                origem=anterior,
                destino=destino,
                item=item,
                erro=str(e)
            )

        item = self.confirmar(item, registro)
        return ResultadoMovimento(
            StatusMovimento.MOVIDO,
            item_id=item['id'],
            origem=anterior,
            destino=destino,
            item=item
        )

    def aplicar(self, item: Dict, destino):
        """Muda a coluna em memória e devolve a coluna anterior"""
        campo = self.definicao.campo_coluna
        anterior = item.get(campo)
        item[campo] = destino
        return anterior

    def confirmar(self, item: Dict, registro: Dict) -> Dict:
        """Gravação aceita: atualiza o item com o que o banco devolveu"""
        logger.info(
            f"🔄 {self.definicao.nome}: item {item['id']} movido para "
            f"{item[self.definicao.campo_coluna]}"
        )

        if self.recarregar:
            self.cache.invalidar(self.definicao.colecao)
            try:
                self.carregar()
            except ErroPersistencia as e:
                # a gravação já valeu; segue com o registro devolvido
                logger.warning(
                    f"⚠️ {self.definicao.nome}: item {item['id']} gravado, "
                    f"mas a recarga do quadro falhou - {e}"
                )
                item.update(registro or {})
            else:
                item = self.item(item['id']) or item
        else:
            item.update(registro or {})

        if self.definicao.mensagem_sucesso:
            self.notificador.sucesso(self.definicao.mensagem_sucesso)
        return item

    def compensar(self, item: Dict, anterior, erro: ErroPersistencia) -> None:
        """Gravação recusada: devolve o item para a coluna anterior"""
        item[self.definicao.campo_coluna] = anterior
        logger.error(f"❌ {self.definicao.nome}: falha ao mover item {item['id']}, revertido - {erro}")
        self.notificador.erro('Erro ao mover item', 'A alteração foi desfeita. Tente novamente.')
