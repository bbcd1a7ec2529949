# apps/metas/urls.py

from django.urls import path
from . import views

app_name = 'metas'

urlpatterns = [
    # Painel Meta Gestão do ano corrente
    path('', views.painel_metas, name='painel_atual'),

    # Painel de um ano específico (HTML ou ?formato=json)
    path('<int:ano>/', views.painel_metas, name='painel'),

    # Salvar meta anual distribuída em metas mensais
    path('<int:ano>/salvar/', views.salvar_metas, name='salvar'),

    # Prévia da progressão (sem gravar)
    path('progressao/', views.previa_progressao, name='previa_progressao'),
]
