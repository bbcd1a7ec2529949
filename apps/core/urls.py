# apps/core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    path('', views.home, name='home'),

    # === MONITORAMENTO ===
    path('health/', views.health_check, name='health'),
]
