# apps/core/management/commands/purge_orphan_workers.py

import logging

from django.core.management.base import BaseCommand
from django.db import transaction
from apps.core.models import Worker

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Remove workers que apontam para cards excluídos ou inexistentes'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Apenas lista o que seria removido'
        )

    def handle(self, *args, **options):
        orphans = Worker.objects.orphaned()
        card_ids = sorted(set(orphans.values_list('card_id', flat=True)))

        if not card_ids:
            self.stdout.write(self.style.SUCCESS('✅ Nenhum worker órfão encontrado.'))
            return

        count = orphans.count()
        self.stdout.write(f'🔍 {count} workers órfãos em {len(card_ids)} cards: {card_ids}')

        if options['dry_run']:
            self.stdout.write(self.style.WARNING('⚠️  --dry-run: nada foi removido.'))
            return

        with transaction.atomic():
            removed, _ = Worker.objects.filter(card_id__in=card_ids).delete()

        logger.info("purge_orphan_workers removeu %d workers de %d cards", removed, len(card_ids))
        self.stdout.write(self.style.SUCCESS(f'✅ {removed} workers órfãos removidos.'))
