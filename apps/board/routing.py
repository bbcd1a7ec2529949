# apps/board/routing.py

from django.urls import re_path
from . import consumers

websocket_urlpatterns = [
    # Quadro específico - movimentações em tempo real
    re_path(r'ws/board/(?P<quadro>[a-z_]+)/$', consumers.BoardConsumer.as_asgi()),

    # Notificações (toasts) do usuário
    re_path(r'ws/notifications/$', consumers.NotificationConsumer.as_asgi()),
]
