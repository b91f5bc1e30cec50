"""
Management command to post a draft document.

Usage:
    python manage.py post_document 42
    python manage.py post_document 42 --yes
"""

from django.core.management.base import BaseCommand, CommandError

from ledgerman import inventory, PostingError


class Command(BaseCommand):
    """Post document command."""

    help = 'Lança um documento rascunho no estoque'

    def add_arguments(self, parser):
        parser.add_argument('doc_id', help='ID do documento')
        parser.add_argument(
            '--yes',
            action='store_true',
            help='Não pede confirmação'
        )

    def handle(self, *args, **options):
        doc_id = options['doc_id']

        try:
            plan = inventory.plan(doc_id)
        except PostingError as e:
            raise CommandError(str(e)) from e

        document = plan.document
        self.stdout.write(f'{document.doc_no} ({document.get_type_display()}) @ {document.warehouse_id}')
        for line in plan.lines:
            signal = '+' if line.delta > 0 else ''
            self.stdout.write(
                f'  {line.sku}: {line.on_hand_before} → {line.on_hand_after} ({signal}{line.delta})'
            )

        message = inventory.confirmation_message(document.type)
        if not options['yes']:
            answer = input(f'{message} [s/N] ')
            if answer.strip().lower() not in ('s', 'sim', 'y', 'yes'):
                self.stdout.write('Cancelado.')
                return

        try:
            document = inventory.post(doc_id)
        except PostingError as e:
            raise CommandError(str(e)) from e

        self.stdout.write(
            self.style.SUCCESS(f'{document.doc_no} lançado em {document.posted_at:%d/%m/%y %H:%M}')
        )
