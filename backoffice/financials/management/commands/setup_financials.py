"""
Management command to run the financial setup for a business unit from a JSON file
"""
import json

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from backoffice.core.exceptions import BusinessRuleError
from backoffice.core.models import BusinessUnit
from backoffice.financials.serializers import FinancialSetupSerializer
from backoffice.financials.services import run_financial_setup


class Command(BaseCommand):
    help = "Creates categories, GL accounts, periods, numbering series and bank accounts from a JSON file"

    def add_arguments(self, parser):
        parser.add_argument('business_unit_id', type=int)
        parser.add_argument('json_file', help='Path to a JSON document shaped like the financial-setup payload')

    def handle(self, *args, **options):
        try:
            business_unit = BusinessUnit.objects.get(pk=options['business_unit_id'])
        except BusinessUnit.DoesNotExist:
            raise CommandError(f"Business unit {options['business_unit_id']} does not exist")

        try:
            with open(options['json_file'], encoding='utf-8') as fh:
                payload = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise CommandError(f"Could not read {options['json_file']}: {e}")

        serializer = FinancialSetupSerializer(data=payload)
        if not serializer.is_valid():
            raise CommandError(f"Invalid setup data: {json.dumps(serializer.errors)}")

        try:
            with transaction.atomic():
                counts = run_financial_setup(business_unit, serializer.validated_data)
        except BusinessRuleError as e:
            raise CommandError(e.message)

        self.stdout.write(self.style.SUCCESS(f"Financial setup completed for {business_unit.code}"))
        for kind, count in counts.items():
            self.stdout.write(f"  {kind}: {count}")
