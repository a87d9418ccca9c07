# apps/board/workers.py

import logging

from apps.core.exceptions import AlreadyAssigned, NotAssigned
from apps.core.models import Worker

logger = logging.getLogger(__name__)


def _unique(member_ids):
    return list(dict.fromkeys(member_ids))


class WorkerReconciler:
    """
    Aplica add/remove de workers de um card

    As duas fases consultam o mesmo snapshot tirado na criação, nunca
    uma releitura: remover um id adicionado na mesma chamada resulta
    em NotAssigned, e adicionar um id removido na mesma chamada em
    AlreadyAssigned (quando é o único id pedido).

    Deve rodar dentro de uma transação; um NotAssigned desfaz o add
    da mesma chamada.
    """

    def __init__(self, card_id):
        self.card_id = card_id
        self.snapshot = Worker.objects.member_ids(card_id)

    @property
    def current(self):
        return set(self.snapshot)

    def add(self, member_ids):
        """
        Insere os ids ainda ausentes

        Rejeita apenas quando todos os ids pedidos já estão no snapshot;
        em sobreposição parcial os já presentes são ignorados.
        """
        if not member_ids:
            return []

        requested = _unique(member_ids)
        current = self.current
        if current.issuperset(requested):
            raise AlreadyAssigned(requested)

        new_ids = [m for m in requested if m not in current]
        skipped = [m for m in requested if m in current]
        if skipped:
            logger.info("Card %s: ignorando workers já atribuídos %s", self.card_id, skipped)

        Worker.objects.bulk_create(
            [Worker(card_id=self.card_id, member_id=m) for m in new_ids]
        )
        return new_ids

    def remove(self, member_ids):
        if not member_ids:
            return []

        requested = _unique(member_ids)
        current = self.current
        missing = [m for m in requested if m not in current]
        if missing:
            raise NotAssigned(missing)

        Worker.objects.for_card(self.card_id).filter(member_id__in=requested).delete()
        return requested

    def apply(self, add_ids=None, remove_ids=None):
        """Add antes de remove; retorna (adicionados, removidos)"""
        added = self.add(add_ids)
        removed = self.remove(remove_ids)
        return added, removed
