# apps/__init__.py

"""
Gestão Imobiliária - Aplicações Django

Este pacote contém todas as aplicações do sistema:
- core: Models, repositório, notificações, cache e permissões
- board: Quadros Kanban (tarefas, acompanhamento de vendas, corretores X1)
- metas: Meta Gestão - progressão mensal da meta anual e indicadores
"""

__version__ = '0.1.0'
__author__ = 'Equipe Gestão Imobiliária'
