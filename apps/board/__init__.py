# apps/board/__init__.py

"""
Board - Quadros Kanban da imobiliária

- Tarefas dos corretores por etapa do processo
- Acompanhamento de vendas por etapa
- X1: ciclo de acompanhamento dos corretores
- Movimentação otimista com reversão em caso de falha
- WebSockets para atualizações em tempo real
"""
