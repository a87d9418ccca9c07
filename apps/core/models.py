# apps/core/models.py

from django.db import models
from django.utils import timezone


class Timestamped(models.Model):
    """
    Base abstrata com timestamps e exclusão lógica

    Linhas com deleted_at preenchido continuam no banco, mas somem
    de todas as consultas feitas pelo manager padrão.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    class Meta:
        abstract = True

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def soft_delete(self):
        """Marca a linha como removida sem apagar fisicamente"""
        self.deleted_at = timezone.now()
        self.save(update_fields=['deleted_at', 'updated_at'])


class LiveQuerySet(models.QuerySet):

    def live(self):
        return self.filter(deleted_at__isnull=True)

    def deleted(self):
        return self.filter(deleted_at__isnull=False)


class LiveManager(models.Manager.from_queryset(LiveQuerySet)):
    """Manager padrão: apenas linhas não removidas"""

    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)


class Board(Timestamped):
    """Quadro Kanban"""

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    objects = LiveManager()
    all_objects = LiveQuerySet.as_manager()

    DEFAULT_COLUMNS = ['Backlog', 'In Progress', 'Review', 'Done']

    class Meta:
        db_table = 'board'
        ordering = ['title']

    def __str__(self):
        return self.title

    def create_default_columns(self):
        """Cria colunas padrão para novo board"""
        for idx, title in enumerate(self.DEFAULT_COLUMNS):
            Column.objects.get_or_create(board=self, position=idx, defaults={'title': title})


class Column(models.Model):
    """Coluna do board Kanban"""

    board = models.ForeignKey(
        Board,
        on_delete=models.CASCADE,
        related_name='columns'
    )
    title = models.CharField(max_length=100)
    position = models.IntegerField(default=0)

    class Meta:
        db_table = 'board_column'
        ordering = ['position', 'title']
        unique_together = ['board', 'position']

    def __str__(self):
        return f"{self.title} - {self.board.title}"


class Card(Timestamped):
    """
    Card do board

    column_id é confiado no momento do move: não existe FK no banco,
    a coluna só é validada na criação.
    """

    TITLE_MAX_LENGTH = 50

    column = models.ForeignKey(
        Column,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name='cards'
    )
    title = models.CharField(max_length=TITLE_MAX_LENGTH)
    description = models.TextField(null=True, blank=True)
    background_color = models.CharField(max_length=20, null=True, blank=True)
    deadline = models.DateTimeField(null=True, blank=True)
    start_at = models.DateTimeField(null=True, blank=True)
    position = models.PositiveIntegerField(default=0)

    objects = LiveManager()
    all_objects = LiveQuerySet.as_manager()

    # Campos que um patch parcial pode sobrescrever
    PATCHABLE_FIELDS = ('title', 'description', 'background_color', 'deadline', 'start_at')

    class Meta:
        db_table = 'card'
        ordering = ['column_id', 'position', 'id']
        indexes = [
            models.Index(fields=['column', 'position'], name='card_column_position_idx'),
        ]

    def __str__(self):
        return self.title

    def apply_patch(self, patch):
        """
        Sobrescreve apenas os campos presentes e não nulos do patch

        Retorna a lista de campos alterados.
        """
        changed = []
        for field in self.PATCHABLE_FIELDS:
            value = patch.get(field)
            if value is None:
                continue
            if getattr(self, field) != value:
                setattr(self, field, value)
                changed.append(field)
        return changed

    def to_dict(self, worker_ids=None):
        return {
            'id': self.id,
            'column_id': self.column_id,
            'title': self.title,
            'description': self.description,
            'background_color': self.background_color,
            'deadline': self.deadline.isoformat() if self.deadline else None,
            'start_at': self.start_at.isoformat() if self.start_at else None,
            'position': self.position,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'workers': list(worker_ids) if worker_ids is not None else [],
        }


class WorkerQuerySet(models.QuerySet):

    def for_card(self, card_id):
        return self.filter(card_id=card_id)

    def for_cards(self, card_ids):
        return self.filter(card_id__in=card_ids).order_by('card_id', 'member_id', 'id')

    def ordered_by_member(self):
        return self.order_by('member_id', 'id')

    def member_ids(self, card_id):
        return list(self.for_card(card_id).ordered_by_member().values_list('member_id', flat=True))

    def orphaned(self):
        """Linhas apontando para cards removidos ou inexistentes"""
        live_ids = Card.objects.values('id')
        return self.exclude(card_id__in=live_ids)


class Worker(models.Model):
    """
    Atribuição (card, membro)

    card_id é só uma referência: apagar o card não apaga as linhas
    automaticamente, o serviço faz a cascata.
    """

    card_id = models.BigIntegerField(db_index=True)
    member_id = models.BigIntegerField(db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = WorkerQuerySet.as_manager()

    class Meta:
        db_table = 'worker'
        ordering = ['card_id', 'member_id', 'id']
        indexes = [
            models.Index(fields=['card_id', 'member_id'], name='worker_card_member_idx'),
        ]

    def __str__(self):
        return f"card {self.card_id} - member {self.member_id}"
