# apps/core/views.py

import logging

from django.contrib.auth.decorators import login_required
from django.core.cache import cache
from django.http import JsonResponse
from django.shortcuts import redirect
from django.utils import timezone

from apps import __version__
from .models import EtapaProcesso

logger = logging.getLogger(__name__)


@login_required
def home(request):
    """Página inicial: gestores vão para as metas, corretores para as tarefas"""
    if request.user.is_gestor:
        return redirect('metas:painel_atual')
    return redirect('board:kanban', quadro='tarefas')


def health_check(request):
    """
    Health check para monitoramento
    """
    try:
        EtapaProcesso.objects.exists()

        cache.set('health_check', 'ok', 60)
        cache.get('health_check')

        return JsonResponse({
            'status': 'healthy',
            'database': 'ok',
            'cache': 'ok',
            'timestamp': timezone.now().isoformat(),
            'version': __version__
        })

    except Exception as e:
        logger.error(f"❌ Health check falhou: {e}")
        return JsonResponse({
            'status': 'unhealthy',
            'error': str(e),
            'timestamp': timezone.now().isoformat(),
            'version': __version__
        }, status=500)
