# apps/metas/__init__.py

"""
Metas - Meta Gestão da imobiliária

Funcionalidades:
- Progressão linear da meta anual em doze metas mensais
- Reconciliação com as metas já gravadas
- Indicadores do painel (realizado x esperado, projeções, contratação)
"""
