# apps/core/repositorio.py

"""
Repositório genérico de recursos

Toda escrita feita pelos quadros e pelas metas passa por aqui. Os registros
trafegam como dicionários simples (chave = attname do campo, ex: 'coluna_id'),
e qualquer falha do banco vira ErroPersistencia.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from django.core.exceptions import FieldError, ObjectDoesNotExist, ValidationError
from django.db import DatabaseError, transaction

from .models import (
    Corretor, EtapaProcesso, HistoricoTarefa, MetaMensal, TarefaCorretor, Venda
)

logger = logging.getLogger(__name__)

Registro = Dict[str, Any]


class ErroPersistencia(Exception):
    """Falha de escrita ou leitura no armazenamento"""

    def __init__(self, mensagem, colecao=None, registro_id=None):
        super().__init__(mensagem)
        self.colecao = colecao
        self.registro_id = registro_id


class RepositorioRecursos(ABC):
    """Contrato de persistência usado pelos serviços de metas e quadros"""

    @abstractmethod
    def listar(self, colecao: str, filtro: Optional[Dict] = None) -> List[Registro]:
        pass

    @abstractmethod
    def criar(self, colecao: str, campos: Dict) -> Registro:
        pass

    @abstractmethod
    def atualizar_por_id(self, colecao: str, registro_id, campos: Dict) -> Registro:
        pass

    @abstractmethod
    def remover_por_id(self, colecao: str, registro_id) -> None:
        pass


class RepositorioDjango(RepositorioRecursos):
    """Implementação sobre o ORM do Django"""

    COLECOES = {
        'metas_mensais': MetaMensal,
        'tarefas': TarefaCorretor,
        'vendas': Venda,
        'corretores': Corretor,
        'etapas': EtapaProcesso,
        'historico_tarefas': HistoricoTarefa,
    }

    def _modelo(self, colecao):
        try:
            return self.COLECOES[colecao]
        except KeyError:
            raise ErroPersistencia(f"Coleção desconhecida: {colecao}", colecao=colecao)

    @staticmethod
    def para_registro(instancia) -> Registro:
        """Converte instância do model em dicionário simples"""
        return {
            campo.attname: getattr(instancia, campo.attname)
            for campo in instancia._meta.concrete_fields
        }

    def listar(self, colecao, filtro=None):
        modelo = self._modelo(colecao)
        try:
            qs = modelo.objects.filter(**(filtro or {}))
            return [self.para_registro(obj) for obj in qs]
        except (DatabaseError, FieldError, ValueError) as e:
            raise ErroPersistencia(f"Erro ao listar {colecao}: {e}", colecao=colecao) from e

    def criar(self, colecao, campos):
        modelo = self._modelo(colecao)
        try:
            with transaction.atomic():
                instancia = modelo(**campos)
                instancia.full_clean()
                instancia.save()
        except (DatabaseError, ValidationError, TypeError, ValueError) as e:
            logger.warning(f"❌ Falha ao criar registro em {colecao}: {e}")
            raise ErroPersistencia(f"Erro ao criar em {colecao}: {e}", colecao=colecao) from e

        logger.info(f"✅ Registro {instancia.pk} criado em {colecao}")
        return self.para_registro(instancia)

    def atualizar_por_id(self, colecao, registro_id, campos):
        modelo = self._modelo(colecao)
        try:
            with transaction.atomic():
                instancia = modelo.objects.select_for_update().get(pk=registro_id)
                for nome, valor in campos.items():
                    setattr(instancia, nome, valor)
                instancia.full_clean()
                instancia.save()
        except ObjectDoesNotExist as e:
            raise ErroPersistencia(
                f"Registro {registro_id} não encontrado em {colecao}",
                colecao=colecao,
                registro_id=registro_id
            ) from e
        except (DatabaseError, ValidationError, TypeError, ValueError) as e:
            logger.warning(f"❌ Falha ao atualizar {colecao}/{registro_id}: {e}")
            raise ErroPersistencia(
                f"Erro ao atualizar {colecao}: {e}",
                colecao=colecao,
                registro_id=registro_id
            ) from e

        return self.para_registro(instancia)

    def remover_por_id(self, colecao, registro_id):
        modelo = self._modelo(colecao)
        try:
            with transaction.atomic():
                removidos, _ = modelo.objects.filter(pk=registro_id).delete()
        except DatabaseError as e:
            raise ErroPersistencia(
                f"Erro ao remover {colecao}/{registro_id}: {e}",
                colecao=colecao,
                registro_id=registro_id
            ) from e

        if not removidos:
            raise ErroPersistencia(
                f"Registro {registro_id} não encontrado em {colecao}",
                colecao=colecao,
                registro_id=registro_id
            )
