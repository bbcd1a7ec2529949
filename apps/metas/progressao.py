# apps/metas/progressao.py

"""
Progressão linear das metas mensais

A meta anual é distribuída em doze metas crescentes: janeiro começa em
1/36 da meta anual e cada mês soma o mesmo incremento, de forma que os
doze meses somem exatamente a meta anual.

    soma = 12 * base + incremento * (0 + 1 + ... + 11) = 12 * base + 66 * incremento

Para 36M: janeiro = 1M, dezembro ~ 5M.
"""

from decimal import Decimal, InvalidOperation
from typing import List

from django.core.exceptions import ValidationError

MESES_NO_ANO = 12

# Janeiro = meta anual / 36
DIVISOR_BASE = 36

# Soma dos índices dos meses (0 + 1 + ... + 11)
SOMA_INDICES = 66


def _como_decimal(valor) -> Decimal:
    if isinstance(valor, Decimal):
        return valor
    try:
        return Decimal(str(valor))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Meta anual inválida: {valor!r}") from e


def calcular_progressao(meta_anual) -> List[Decimal]:
    """
    Distribui a meta anual em 12 metas mensais crescentes

    Args:
        meta_anual: valor não negativo (Decimal, int, float ou str)

    Returns:
        Lista com 12 valores (janeiro a dezembro) sem arredondamento
    """
    meta_anual = _como_decimal(meta_anual)

    if not meta_anual.is_finite() or meta_anual < 0:
        raise ValidationError(f"Meta anual deve ser um valor não negativo: {meta_anual}")

    if meta_anual == 0:
        return [Decimal('0')] * MESES_NO_ANO

    base = meta_anual / DIVISOR_BASE
    crescimento_total = meta_anual - MESES_NO_ANO * base
    incremento = crescimento_total / SOMA_INDICES

    return [base + i * incremento for i in range(MESES_NO_ANO)]
