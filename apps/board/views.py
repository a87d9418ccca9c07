# apps/board/views.py

import json
import logging
from functools import wraps

from django.db import transaction
from django.http import JsonResponse, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from apps.core.exceptions import BoardError, ValidationFailed
from apps.core.permissions import login_required_json
from .services import CardService

logger = logging.getLogger(__name__)

service = CardService()


def json_errors(view_func):
    """Converte BoardError em resposta JSON com o status da exceção"""

    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except BoardError as e:
            logger.info("%s %s -> %s (%s)", request.method, request.path, e.code, e.message)
            return JsonResponse(e.to_dict(), status=e.status)

    return wrapped_view


def api_view(*methods):
    """Empilha os decoradores comuns das views de cards"""

    def decorator(view_func):
        view = json_errors(view_func)
        view = login_required_json(view)
        view = require_http_methods(list(methods))(view)
        view = csrf_exempt(view)
        # o serviço controla as próprias transações (o move precisa
        # confirmar antes de liberar o lock)
        return transaction.non_atomic_requests(view)

    return decorator


def _json_body(request):
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationFailed(message='Corpo da requisição não é JSON válido.')
    if not isinstance(data, dict):
        raise ValidationFailed(message='Corpo da requisição deve ser um objeto JSON.')
    return data


@api_view('GET', 'POST')
def column_cards(request, column_id):
    """
    GET: lista os cards da coluna, em ordem
    POST: cria um card no final da coluna
    """
    if request.method == 'POST':
        result = service.create_card(column_id, _json_body(request), actor=request.user)
        return JsonResponse({'success': True, 'card': result.to_dict()}, status=201)

    results = service.list_cards(column_id)
    return JsonResponse({'success': True, 'cards': [r.to_dict() for r in results]})


@api_view('GET', 'PATCH', 'DELETE')
def card_detail(request, card_id):
    if request.method == 'PATCH':
        result = service.update_card(card_id, _json_body(request), actor=request.user)
    elif request.method == 'DELETE':
        service.delete_card(card_id, actor=request.user)
        return HttpResponse(status=204)
    else:
        result = service.get_card(card_id)

    return JsonResponse({'success': True, 'card': result.to_dict()})


@api_view('PATCH', 'PUT')
def card_workers(request, card_id):
    """Body: {"add": [ids], "remove": [ids]}"""
    data = _json_body(request)
    result = service.update_workers(
        card_id,
        add=data.get('add'),
        remove=data.get('remove'),
        actor=request.user
    )
    return JsonResponse({'success': True, 'card': result.to_dict()})


@api_view('PATCH', 'PUT')
def card_move(request, card_id):
    """Body: {"column_id": n, "position": k}"""
    result = service.move_card(card_id, _json_body(request), actor=request.user)
    return JsonResponse({'success': True, 'card': result.to_dict()})
