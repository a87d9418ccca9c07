# apps/core/permissions.py

from functools import wraps
from django.http import JsonResponse


def login_required_json(view_func):
    """
    Decorador para views JSON
    Retorna 401 ao invés de redirecionar para o login
    """

    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse(
                {'success': False, 'error': 'Autenticação necessária.', 'code': 'unauthenticated'},
                status=401
            )
        return view_func(request, *args, **kwargs)

    return wrapped_view
