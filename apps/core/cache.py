# apps/core/cache.py

"""
Cache das coleções usadas pelos quadros e pelas metas

Leitura sob demanda (get-or-fetch), invalidação manual e aviso de
alteração externa através do sinal colecao_alterada. Cada coleção tem uma
versão no cache; invalidar incrementa a versão, o que descarta de uma vez
todos os escopos (filtros) já guardados.
"""

import logging
from typing import Callable, List

from django.conf import settings
from django.core.cache import cache as cache_padrao
from django.dispatch import Signal

logger = logging.getLogger(__name__)

# Enviado com sender=<nome da coleção> quando os dados mudam no banco
colecao_alterada = Signal()


def _chave_versao(colecao):
    return f'imobiliaria:colecao:{colecao}:versao'


def versao_colecao(colecao, backend=None) -> int:
    backend = backend or cache_padrao
    versao = backend.get(_chave_versao(colecao))
    if versao is None:
        backend.add(_chave_versao(colecao), 1, None)
        versao = backend.get(_chave_versao(colecao), 1)
    return versao


def invalidar_colecao(colecao, backend=None) -> None:
    backend = backend or cache_padrao
    try:
        backend.incr(_chave_versao(colecao))
    except ValueError:
        # chave ainda não existe
        backend.set(_chave_versao(colecao), 2, None)


class CacheColecoes:
    """Cache explícito de coleções, passado como dependência aos serviços"""

    def __init__(self, backend=None, timeout=None):
        self.backend = backend or cache_padrao
        self.timeout = timeout if timeout is not None else getattr(settings, 'IMOBILIARIA_CACHE_TIMEOUT', 300)
        self._receptores = []

    def chave(self, colecao: str, escopo: str = '') -> str:
        versao = versao_colecao(colecao, self.backend)
        return f'imobiliaria:colecao:{colecao}:v{versao}:{escopo}'

    def obter(self, colecao: str, buscar: Callable[[], List], escopo: str = '') -> List:
        """Retorna a coleção do cache ou busca e guarda"""
        chave = self.chave(colecao, escopo)
        dados = self.backend.get(chave)
        if dados is None:
            dados = buscar()
            self.backend.set(chave, dados, self.timeout)
            logger.debug(f"🗄️ Coleção {colecao} carregada ({len(dados)} registros)")
        return dados

    def invalidar(self, colecao: str) -> None:
        invalidar_colecao(colecao, self.backend)

    def assinar(self, colecao: str, callback: Callable[[str], None]) -> None:
        """
        Registra callback chamado quando a coleção é alterada no banco

        O callback recebe o nome da coleção; o cache já está invalidado
        quando ele é chamado.
        """
        def receptor(sender, **kwargs):
            if sender != colecao:
                return
            self.invalidar(colecao)
            callback(colecao)

        # weak=False porque o receptor é uma closure local
        colecao_alterada.connect(receptor, weak=False)
        self._receptores.append(receptor)

    def cancelar_assinaturas(self) -> None:
        for receptor in self._receptores:
            colecao_alterada.disconnect(receptor)
        self._receptores = []
