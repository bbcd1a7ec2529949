# apps/metas/services.py

"""
Serviço de metas mensais

Reconcilia a progressão calculada com as metas já gravadas: cria o que
falta, atualiza o que mudou além da tolerância e ignora o resto.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from django.conf import settings

from apps.core.repositorio import ErroPersistencia, RepositorioRecursos
from apps.core.notificacoes import Notificador
from apps.core.cache import CacheColecoes
from apps.core.utils import arredondar_centavos
from .progressao import calcular_progressao, MESES_NO_ANO

logger = logging.getLogger(__name__)

COLECAO_METAS = 'metas_mensais'


@dataclass
class ResultadoReconciliacao:
    """Resumo do que foi gravado para cada mês"""

    ano: int
    criados: List[int] = field(default_factory=list)
    atualizados: List[int] = field(default_factory=list)
    ignorados: List[int] = field(default_factory=list)
    mes_com_erro: Optional[int] = None
    erro: Optional[str] = None

    @property
    def sucesso(self):
        return self.erro is None

    @property
    def total_escritas(self):
        return len(self.criados) + len(self.atualizados)

    def para_dict(self) -> Dict:
        return {
            'ano': self.ano,
            'sucesso': self.sucesso,
            'criados': self.criados,
            'atualizados': self.atualizados,
            'ignorados': self.ignorados,
            'mes_com_erro': self.mes_com_erro,
            'erro': self.erro,
        }


def tolerancia_padrao() -> Decimal:
    return Decimal(str(getattr(settings, 'IMOBILIARIA_TOLERANCIA_META', '0.01')))


def reconciliar_e_persistir(
    ano: int,
    progressao: List[Decimal],
    metas_existentes: Iterable[Dict],
    repositorio: RepositorioRecursos,
    notificador: Notificador,
    tolerancia: Optional[Decimal] = None,
) -> ResultadoReconciliacao:
    """
    Grava a progressão mensal de um ano

    Para cada mês de 1 a 12:
    - existe meta gravada: atualiza se a diferença passar da tolerância
    - não existe: cria se o valor calculado for positivo

    A primeira falha interrompe os meses restantes; os meses já gravados
    permanecem gravados. O resultado é notificado uma única vez.
    """
    if len(progressao) != MESES_NO_ANO:
        raise ValueError(f"Progressão deve ter {MESES_NO_ANO} valores, recebeu {len(progressao)}")

    tolerancia = tolerancia if tolerancia is not None else tolerancia_padrao()
    resultado = ResultadoReconciliacao(ano=ano)

    existentes = {
        meta['mes']: meta
        for meta in metas_existentes
        if meta['ano'] == ano
    }

    for mes in range(1, MESES_NO_ANO + 1):
        valor = progressao[mes - 1]
        existente = existentes.get(mes)

        try:
            if existente is not None:
                diferenca = abs(Decimal(str(existente['valor_meta'])) - valor)
                if diferenca > tolerancia:
                    repositorio.atualizar_por_id(
                        COLECAO_METAS,
                        existente['id'],
                        {'valor_meta': arredondar_centavos(valor)}
                    )
                    resultado.atualizados.append(mes)
                else:
                    resultado.ignorados.append(mes)
            elif valor > 0:
                repositorio.criar(COLECAO_METAS, {
                    'ano': ano,
                    'mes': mes,
                    'valor_meta': arredondar_centavos(valor),
                })
                resultado.criados.append(mes)
            else:
                resultado.ignorados.append(mes)

        except ErroPersistencia as e:
            resultado.mes_com_erro = mes
            resultado.erro = str(e)
            logger.error(f"❌ Erro ao salvar meta {mes:02d}/{ano}: {e}")
            notificador.erro(
                'Erro ao salvar metas',
                f'A meta de {mes:02d}/{ano} não foi salva; os meses anteriores foram mantidos.'
            )
            return resultado

    logger.info(
        f"🎯 Metas {ano} salvas - {len(resultado.criados)} criadas, "
        f"{len(resultado.atualizados)} atualizadas, {len(resultado.ignorados)} sem alteração"
    )
    notificador.sucesso('Metas salvas com sucesso!')
    return resultado


def carregar_metas_ano(ano: int, repositorio: RepositorioRecursos, cache: CacheColecoes) -> List[Dict]:
    """Metas mensais gravadas para o ano, lidas pelo cache"""
    return cache.obter(
        COLECAO_METAS,
        lambda: repositorio.listar(COLECAO_METAS, {'ano': ano}),
        escopo=str(ano)
    )


def meta_anual_salva(metas: Iterable[Dict]) -> Decimal:
    """Meta anual = soma das metas mensais gravadas"""
    return sum((Decimal(str(meta['valor_meta'])) for meta in metas), Decimal('0'))


def salvar_meta_anual(
    ano: int,
    meta_anual,
    repositorio: RepositorioRecursos,
    notificador: Notificador,
    cache: CacheColecoes,
) -> ResultadoReconciliacao:
    """Calcula a progressão da meta anual e grava as doze metas do ano"""
    progressao = calcular_progressao(meta_anual)
    existentes = carregar_metas_ano(ano, repositorio, cache)
    try:
        return reconciliar_e_persistir(ano, progressao, existentes, repositorio, notificador)
    finally:
        cache.invalidar(COLECAO_METAS)
