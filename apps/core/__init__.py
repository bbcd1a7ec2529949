# apps/core/__init__.py

"""
Core - cadastros da imobiliária

- Models: usuários, corretores, vendas, etapas, tarefas e metas mensais
- Repositório genérico de recursos e notificações
- Cache de coleções e permissões
"""
