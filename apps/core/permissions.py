# apps/core/permissions.py

from functools import wraps
from django.http import JsonResponse


class ImobiliariaPermissions:
    """
    Permissões da imobiliária
    Baseadas nos tipos de usuário: admin, diretor, gerente, corretor
    """

    @staticmethod
    def is_gestor(user):
        """Admin, diretor ou gerente"""
        return user.is_authenticated and user.tipo in ('admin', 'diretor', 'gerente')

    @staticmethod
    def is_corretor(user):
        return user.is_authenticated and user.tipo == 'corretor'

    @staticmethod
    def pode_gerenciar_metas(user):
        """Salvar metas mensais e meta de contratação"""
        return ImobiliariaPermissions.is_gestor(user)

    @staticmethod
    def pode_gerenciar_etapas(user):
        """Criar, renomear e remover etapas do processo"""
        return ImobiliariaPermissions.is_gestor(user)

    @staticmethod
    def pode_mover_item(user, quadro, item):
        """
        Verifica se pode mover um item de quadro

        Gestores movem qualquer item. Corretor só move as próprias
        tarefas; vendas e o quadro X1 são exclusivos dos gestores.
        """
        if not user.is_authenticated:
            return False

        if ImobiliariaPermissions.is_gestor(user):
            return True

        if quadro == 'tarefas' and user.tipo == 'corretor':
            corretor = getattr(user, 'corretor', None)
            return corretor is not None and item.get('corretor_id') == corretor.id

        return False


def ajax_requer_permissao(permission_check):
    """
    Decorador genérico para views AJAX/HTMX
    Retorna 403 em JSON ao invés de redirecionar
    """

    def decorator(view_func):
        @wraps(view_func)
        def wrapped_view(request, *args, **kwargs):
            if not permission_check(request.user):
                return JsonResponse(
                    {'success': False, 'error': 'Você não tem permissão para esta ação.'},
                    status=403
                )
            return view_func(request, *args, **kwargs)

        return wrapped_view

    return decorator
