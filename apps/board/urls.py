# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # Movimentação (drag-and-drop)
    path('mover-item/', views.mover_item_ajax, name='mover_item'),

    # Etapas do processo
    path('etapas/criar/', views.criar_etapa, name='criar_etapa'),
    path('etapas/<int:etapa_id>/renomear/', views.renomear_etapa, name='renomear_etapa'),
    path('etapas/<int:etapa_id>/remover/', views.remover_etapa, name='remover_etapa'),

    # Histórico de tarefas
    path('tarefas/<int:tarefa_id>/historico/', views.historico_tarefa, name='historico_tarefa'),

    # Quadros: tarefas, acompanhamento, corretores (X1)
    path('<slug:quadro>/', views.quadro_kanban_view, name='kanban'),
]
