# apps/core/exceptions.py

"""
Erros do núcleo de cards

Cada classe carrega um code estável e o status HTTP correspondente,
para que o chamador decida pelo tipo e nunca pela mensagem.
"""


class BoardError(Exception):
    code = 'error'
    status = 400
    default_message = 'Erro ao processar a requisição.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'success': False, 'error': self.message, 'code': self.code}


# === NÃO ENCONTRADO ===

class NotFound(BoardError):
    code = 'not_found'
    status = 404
    default_message = 'Recurso não encontrado.'


class CardNotFound(NotFound):
    code = 'card_not_found'
    default_message = 'Card não encontrado.'

    def __init__(self, card_id=None):
        self.card_id = card_id
        super().__init__(f'Card {card_id} não encontrado.' if card_id is not None else None)


class ColumnNotFound(NotFound):
    code = 'column_not_found'
    default_message = 'Coluna não encontrada.'

    def __init__(self, column_id=None):
        self.column_id = column_id
        super().__init__(f'Coluna {column_id} não encontrada.' if column_id is not None else None)


# === CONFLITOS DE WORKERS ===

class WorkerConflict(BoardError):
    code = 'worker_conflict'
    status = 409

    def __init__(self, member_ids=None, message=None):
        self.member_ids = sorted(member_ids or [])
        super().__init__(message)

    def to_dict(self):
        data = super().to_dict()
        data['member_ids'] = self.member_ids
        return data


class AlreadyAssigned(WorkerConflict):
    code = 'already_assigned'
    default_message = 'Todos os membros informados já são workers do card.'


class NotAssigned(WorkerConflict):
    code = 'not_assigned'
    default_message = 'Membro informado não é worker do card.'


# === LOCK ===

class Busy(BoardError):
    code = 'busy'
    status = 423
    default_message = 'Outro card está sendo movido. Tente novamente.'

    def __init__(self, lock_name=None, wait_timeout=None):
        self.lock_name = lock_name
        self.wait_timeout = wait_timeout
        super().__init__()


# === VALIDAÇÃO ===

class ValidationFailed(BoardError):
    code = 'validation'
    status = 400
    default_message = 'Dados inválidos.'

    def __init__(self, errors=None, message=None):
        self.errors = errors or {}
        super().__init__(message)

    @classmethod
    def from_form(cls, form):
        return cls({field: [str(e) for e in errs] for field, errs in form.errors.items()})

    def to_dict(self):
        data = super().to_dict()
        data['errors'] = self.errors
        return data
