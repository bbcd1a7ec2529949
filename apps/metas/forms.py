# apps/metas/forms.py

from datetime import date
from django import forms


class MetaAnualForm(forms.Form):
    """Meta anual de faturamento informada pelo gestor"""

    meta_anual = forms.DecimalField(
        label='Meta Anual de Faturamento',
        min_value=0,
        max_digits=16,
        decimal_places=2,
        widget=forms.NumberInput(attrs={
            'class': 'form-input w-full px-4 py-2 border rounded-lg',
            'placeholder': 'Ex: 36000000',
            'step': '0.01'
        })
    )


class MetaContratacaoForm(forms.Form):
    """Meta de contratação de corretores"""

    meta_contratacao = forms.IntegerField(
        label='Meta de corretores ativos',
        min_value=0,
        required=False
    )


def validar_ano(ano):
    """Anos aceitos no seletor: até o próximo ano"""
    return 2000 <= ano <= date.today().year + 1
