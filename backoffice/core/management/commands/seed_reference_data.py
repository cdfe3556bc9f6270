"""
Management command to create the reference rows every installation needs
"""
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from backoffice.core.models import BusinessUnit, Role
from backoffice.financials.models import AccountType, NumberingSeries

ROLES = [
    (Role.ADMIN, 'Full access to the business unit, including approvals and setup'),
    (Role.MANAGER, 'Manages operations and reviews documents'),
    (Role.SUPERVISOR, 'Authorizes restricted POS actions'),
    (Role.CASHIER, 'Settles orders and posts POS sales'),
    (Role.STAFF, 'Takes orders and records day-to-day documents'),
]


class Command(BaseCommand):
    help = "Creates default roles and account types, and numbering series for a business unit"

    def add_arguments(self, parser):
        parser.add_argument(
            '--business-unit',
            dest='business_unit',
            help='Code of a business unit to create numbering series for',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(self.style.SUCCESS("SEEDING REFERENCE DATA"))
        self.stdout.write(self.style.SUCCESS("=" * 80))

        for name, description in ROLES:
            _, created = Role.objects.get_or_create(name=name, defaults={'description': description})
            self.report('Role', name, created)

        for name, normal_balance in AccountType.DEFAULT_NORMAL_BALANCES.items():
            _, created = AccountType.objects.get_or_create(
                name=name, defaults={'default_normal_balance': normal_balance}
            )
            self.report('Account type', name, created)

        code = options.get('business_unit')
        if code:
            try:
                business_unit = BusinessUnit.objects.get(code=code)
            except BusinessUnit.DoesNotExist:
                raise CommandError(f"Business unit '{code}' does not exist")

            for document_type, label in NumberingSeries.DOCUMENT_TYPE_CHOICES:
                _, created = NumberingSeries.objects.get_or_create(
                    business_unit=business_unit,
                    document_type=document_type,
                    defaults={
                        'name': label,
                        'prefix': NumberingSeries.DEFAULT_PREFIXES[document_type],
                        'next_number': 1,
                    },
                )
                self.report('Numbering series', f"{business_unit.code} {document_type}", created)

        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(f"Roles: {Role.objects.count()}")
        self.stdout.write(f"Account types: {AccountType.objects.count()}")

    def report(self, kind, name, created):
        if created:
            self.stdout.write(self.style.SUCCESS(f"  Created {kind}: {name}"))
        else:
            self.stdout.write(self.style.WARNING(f"  Skipped {kind} (already exists): {name}"))
