# apps/core/utils.py

import json
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Numero = Union[int, float, Decimal]

CENTAVOS = Decimal('0.01')


def arredondar_centavos(valor: Numero) -> Decimal:
    """Arredonda para duas casas (meio para cima), como o banco grava"""
    return Decimal(str(valor)).quantize(CENTAVOS, rounding=ROUND_HALF_UP)


def formatar_moeda(valor: Numero) -> str:
    """
    Formata valor em Real brasileiro
    Ex: 1234567.8 -> "R$ 1.234.567,80"
    """
    valor = arredondar_centavos(valor)
    sinal = '-' if valor < 0 else ''
    texto = f"{abs(valor):,.2f}"
    # 1,234,567.80 -> 1.234.567,80
    texto = texto.replace(',', '_').replace('.', ',').replace('_', '.')
    return f"{sinal}R$ {texto}"


def formatar_moeda_compacta(valor: Numero) -> str:
    """
    Formata valores grandes de forma compacta
    Ex: 36000000 -> "R$ 36,0M", 15000 -> "R$ 15K"
    """
    valor = Decimal(str(valor))
    if valor >= 1_000_000:
        milhoes = (valor / 1_000_000).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)
        return f"R$ {str(milhoes).replace('.', ',')}M"
    if valor >= 1_000:
        milhares = (valor / 1_000).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
        return f"R$ {milhares}K"
    return formatar_moeda(valor)


def formatar_percentual(valor: Numero) -> str:
    """Ex: 45.67 -> "45,7%" """
    valor = Decimal(str(valor)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)
    return f"{str(valor).replace('.', ',')}%"


def dados_requisicao(request):
    """
    Dados enviados por AJAX (JSON) ou formulário

    Raises:
        ValueError: corpo JSON inválido ou que não é um objeto
    """
    if request.content_type != 'application/json':
        return request.POST

    dados = json.loads(request.body or b'{}')
    if not isinstance(dados, dict):
        raise ValueError("Corpo JSON deve ser um objeto")
    return dados
