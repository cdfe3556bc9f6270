# Generated manually

from django.db import migrations

ACCOUNT_TYPES = [
    ('ASSET', 'DEBIT'),
    ('LIABILITY', 'CREDIT'),
    ('EQUITY', 'CREDIT'),
    ('REVENUE', 'CREDIT'),
    ('EXPENSE', 'DEBIT'),
]


def seed_account_types(apps, schema_editor):
    AccountType = apps.get_model('financials', 'AccountType')
    for name, normal_balance in ACCOUNT_TYPES:
        AccountType.objects.get_or_create(name=name, defaults={'default_normal_balance': normal_balance})


def remove_account_types(apps, schema_editor):
    AccountType = apps.get_model('financials', 'AccountType')
    AccountType.objects.filter(name__in=[name for name, _ in ACCOUNT_TYPES], accounts__isnull=True).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('financials', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_account_types, remove_account_types),
    ]
