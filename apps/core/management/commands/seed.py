# apps/core/management/commands/seed.py

from django.core.management.base import BaseCommand
from django.db import transaction
from apps.core.models import Board, Card, Worker


DEMO_CARDS = {
    'Backlog': ['Configurar Redis', 'Escrever testes de move'],
    'In Progress': ['Lock de movimentação'],
    'Review': ['Reconciliação de workers'],
}


class Command(BaseCommand):
    help = 'Cria um board de demonstração com colunas e cards (idempotente)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--board-title',
            default='Demo',
            help='Título do board de demonstração'
        )
        parser.add_argument(
            '--member',
            type=int,
            action='append',
            default=[],
            help='Id de membro a atribuir como worker nos cards (pode repetir)'
        )

    @transaction.atomic
    def handle(self, *args, **options):
        board, created = Board.objects.get_or_create(title=options['board_title'])
        board.create_default_columns()

        if not created:
            self.stdout.write(self.style.WARNING(f'⚠️  Board "{board.title}" já existe, nada a fazer.'))
            return

        self.stdout.write(f'🌱 Populando board "{board.title}"...')

        columns = {column.title: column for column in board.columns.all()}
        total = 0
        for column_title, titles in DEMO_CARDS.items():
            column = columns[column_title]
            for position, title in enumerate(titles):
                card = Card.objects.create(column=column, title=title, position=position)
                Worker.objects.bulk_create(
                    [Worker(card_id=card.id, member_id=m) for m in dict.fromkeys(options['member'])]
                )
                total += 1

        self.stdout.write(
            self.style.SUCCESS(f'✅ Board "{board.title}" criado com {len(columns)} colunas e {total} cards.')
        )
