"""
Management command to check that balances match the ledger.

Usage:
    python manage.py check_ledger
    python manage.py check_ledger --fix
"""

from django.core.management.base import BaseCommand

from ledgerman import inventory


class Command(BaseCommand):
    """Ledger integrity check command."""

    help = 'Confere saldos contra o razão de lançamentos'

    def add_arguments(self, parser):
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Recalcula os saldos divergentes a partir do razão'
        )

    def handle(self, *args, **options):
        mismatches = inventory.verify()

        if not mismatches:
            self.stdout.write(self.style.SUCCESS('0 divergência(s)'))
            return

        for balance, total in mismatches:
            self.stdout.write(
                f'{balance.sku} @ {balance.warehouse_id}: saldo {balance.on_hand}, razão {total}'
            )

        if options['fix']:
            for balance, total in mismatches:
                if balance.pk is None:
                    # Pair moved in the ledger but never got a balance row
                    balance.on_hand = total
                    balance.version = 1
                    balance.save()
                else:
                    balance.recalculate()
            self.stdout.write(
                self.style.SUCCESS(f'{len(mismatches)} divergência(s) corrigida(s)')
            )
        else:
            self.stdout.write(
                self.style.WARNING(f'{len(mismatches)} divergência(s)')
            )
