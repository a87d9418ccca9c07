# apps/board/services.py

"""
Serviço de mutação de cards

Criação, leitura, atualização parcial, exclusão (com cascata dos
workers), reconciliação de workers e movimentação sob lock.

Cada método abre suas próprias transações; as views não devem
envolver as chamadas em ATOMIC_REQUESTS.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import List, Optional

from django.db import DatabaseError, transaction

from apps.core.exceptions import CardNotFound, ColumnNotFound, ValidationFailed
from apps.core.forms import CardCreateForm, CardPatchForm, MoveCardForm, WorkersForm
from apps.core.models import Card, Column, Worker
from .locks import MovementGuard
from .workers import WorkerReconciler

logger = logging.getLogger(__name__)


@dataclass
class CardResult:
    """Card + lista de ids dos workers, montado para a resposta"""

    card: Card
    worker_ids: List[int] = field(default_factory=list)

    def to_dict(self):
        return self.card.to_dict(self.worker_ids)


def _actor_id(actor):
    return getattr(actor, 'pk', actor)


def _validate(form):
    if not form.is_valid():
        raise ValidationFailed.from_form(form)
    return form.cleaned_data


class CardService:

    def __init__(self, guard: Optional[MovementGuard] = None):
        self._guard = guard

    @property
    def guard(self):
        return self._guard or MovementGuard.from_settings()

    # === LEITURA ===

    def _get_live_card(self, card_id, for_update=False):
        queryset = Card.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(pk=card_id)
        except Card.DoesNotExist:
            raise CardNotFound(card_id)

    def get_card(self, card_id):
        card = self._get_live_card(card_id)
        return CardResult(card, Worker.objects.member_ids(card.id))

    def list_cards(self, column_id):
        """Cards vivos da coluna em ordem, com os workers de cada um"""
        cards = list(Card.objects.filter(column_id=column_id).order_by('position', 'id'))

        # uma única consulta de workers para a coluna inteira
        workers = defaultdict(list)
        rows = Worker.objects.for_cards([c.id for c in cards]).values_list('card_id', 'member_id')
        for card_id, member_id in rows:
            workers[card_id].append(member_id)

        return [CardResult(card, workers[card.id]) for card in cards]

    # === CRIAÇÃO / ATUALIZAÇÃO / EXCLUSÃO ===

    def create_card(self, column_id, data, actor=None):
        cleaned = _validate(CardCreateForm(data))

        with transaction.atomic():
            if not Column.objects.filter(pk=column_id).exists():
                raise ColumnNotFound(column_id)
            position = Card.objects.filter(column_id=column_id).count()
            card = Card.objects.create(column_id=column_id, position=position, **cleaned)

        logger.info("Card %s criado na coluna %s por %s", card.id, column_id, _actor_id(actor))
        return CardResult(card, [])

    def update_card(self, card_id, data, actor=None):
        patch = CardPatchForm(data)
        _validate(patch)

        with transaction.atomic():
            card = self._get_live_card(card_id, for_update=True)
            changed = card.apply_patch(patch.patch())
            if changed:
                card.save(update_fields=changed + ['updated_at'])
                logger.info("Card %s atualizado (%s) por %s", card.id, ', '.join(changed), _actor_id(actor))
            worker_ids = Worker.objects.member_ids(card.id)

        return CardResult(card, worker_ids)

    def delete_card(self, card_id, actor=None):
        """
        Exclusão lógica do card e depois remoção dos workers

        A exclusão do card é confirmada antes da limpeza. Se a limpeza
        falhar o card continua excluído e os workers ficam órfãos até o
        purge_orphan_workers.
        """
        with transaction.atomic():
            card = self._get_live_card(card_id, for_update=True)
            card.soft_delete()

        logger.info("Card %s excluído por %s", card.id, _actor_id(actor))

        try:
            with transaction.atomic():
                removed, _ = Worker.objects.for_card(card.id).delete()
        except DatabaseError:
            logger.exception("Falha ao remover workers do card excluído %s", card.id)
            raise

        if removed:
            logger.info("Card %s: %d workers removidos em cascata", card.id, removed)

    # === WORKERS ===

    def update_workers(self, card_id, add=None, remove=None, actor=None):
        cleaned = _validate(WorkersForm({'add': add, 'remove': remove}))

        with transaction.atomic():
            card = self._get_live_card(card_id, for_update=True)
            reconciler = WorkerReconciler(card.id)
            added, removed = reconciler.apply(cleaned.get('add'), cleaned.get('remove'))

        if added or removed:
            logger.info(
                "Card %s workers: +%s -%s por %s", card.id, added, removed, _actor_id(actor)
            )
        return CardResult(card, Worker.objects.member_ids(card.id))

    # === MOVIMENTAÇÃO ===

    def move_card(self, card_id, move_to, actor=None):
        """
        Move o card para outra coluna/posição

        Todo o ler-alterar-gravar roda dentro da guarda global de
        movimentação; a leitura dos workers fica fora dela.
        """
        cleaned = _validate(MoveCardForm(move_to))
        target_column_id = cleaned['column_id']
        position = cleaned.get('position')

        with self.guard.hold():
            with transaction.atomic():
                card = self._get_live_card(card_id, for_update=True)
                source = (card.column_id, card.position)
                self._reposition(card, target_column_id, position)

        logger.info(
            "Card %s movido de %s:%s para %s:%s por %s",
            card.id, source[0], source[1], card.column_id, card.position, _actor_id(actor)
        )
        return CardResult(card, Worker.objects.member_ids(card.id))

    def _reposition(self, card, target_column_id, position):
        source_column_id = card.column_id

        siblings = list(
            Card.objects.select_for_update()
            .filter(column_id=target_column_id)
            .exclude(pk=card.pk)
            .order_by('position', 'id')
        )
        index = len(siblings) if position is None else min(position, len(siblings))
        siblings.insert(index, card)

        if source_column_id != target_column_id:
            remaining = list(
                Card.objects.select_for_update()
                .filter(column_id=source_column_id)
                .exclude(pk=card.pk)
                .order_by('position', 'id')
            )
            self._renumber(remaining)

        card.column_id = target_column_id
        self._renumber(siblings, skip=card)
        card.save(update_fields=['column', 'position', 'updated_at'])

    @staticmethod
    def _renumber(cards, skip=None):
        changed = []
        for idx, c in enumerate(cards):
            if c.position != idx:
                c.position = idx
                if c is not skip:
                    changed.append(c)
        if changed:
            Card.objects.bulk_update(changed, ['position'])
