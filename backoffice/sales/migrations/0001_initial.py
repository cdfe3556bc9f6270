# Generated manually

import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models

SETTLEMENT_CHOICES = [('OPEN', 'Open'), ('PARTIALLY_SETTLED', 'Partially Settled'), ('SETTLED', 'Settled')]
DOCUMENT_STATUS_CHOICES = [('OPEN', 'Open'), ('CLOSED', 'Closed'), ('CANCELLED', 'Cancelled')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        ('catalog', '0001_initial'),
        ('financials', '0001_initial'),
        ('parties', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='SalesQuotation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('doc_num', models.CharField(max_length=50)),
                ('document_date', models.DateField()),
                ('posting_date', models.DateField()),
                ('valid_until', models.DateField()),
                ('remarks', models.TextField(blank=True)),
                ('status', models.CharField(choices=DOCUMENT_STATUS_CHOICES, default='OPEN', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('business_partner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sales_quotations', to='parties.businesspartner')),
                ('business_unit', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sales_quotations', to='core.businessunit')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sales_quotations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'sales_quotations',
                'ordering': ['-created_at', '-doc_num'],
                'unique_together': {('business_unit', 'doc_num')},
            },
        ),
        migrations.CreateModel(
            name='SalesQuotationItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('description', models.CharField(max_length=255)),
                ('quantity', models.DecimalField(decimal_places=4, max_digits=14)),
                ('unit_price', models.DecimalField(decimal_places=4, max_digits=15)),
                ('line_total', models.DecimalField(decimal_places=2, max_digits=18)),
                ('menu_item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='quotation_items', to='catalog.menuitem')),
                ('sales_quotation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='sales.salesquotation')),
            ],
            options={
                'db_table': 'sales_quotation_items',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='ARInvoice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('doc_num', models.CharField(max_length=50)),
                ('posting_date', models.DateField()),
                ('due_date', models.DateField()),
                ('document_date', models.DateField()),
                ('remarks', models.TextField(blank=True)),
                ('subtotal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=18)),
                ('tax_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=18)),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=18)),
                ('amount_paid', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=18)),
                ('status', models.CharField(choices=DOCUMENT_STATUS_CHOICES, default='OPEN', max_length=10)),
                ('settlement_status', models.CharField(choices=SETTLEMENT_CHOICES, default='OPEN', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('base_quotation', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='ar_invoices', to='sales.salesquotation')),
                ('business_partner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ar_invoices', to='parties.businesspartner')),
                ('business_unit', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ar_invoices', to='core.businessunit')),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ar_invoices', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'ar_invoices',
                'ordering': ['-posting_date', '-doc_num'],
                'unique_together': {('business_unit', 'doc_num')},
            },
        ),
        migrations.CreateModel(
            name='ARInvoiceItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('description', models.CharField(max_length=255)),
                ('quantity', models.DecimalField(decimal_places=4, max_digits=14)),
                ('unit_price', models.DecimalField(decimal_places=4, max_digits=15)),
                ('discount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=15)),
                ('line_total', models.DecimalField(decimal_places=2, max_digits=18)),
                ('ar_invoice', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='sales.arinvoice')),
                ('gl_account', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ar_invoice_items', to='financials.glaccount')),
                ('menu_item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='ar_invoice_items', to='catalog.menuitem')),
            ],
            options={
                'db_table': 'ar_invoice_items',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='IncomingPayment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('doc_num', models.CharField(max_length=50)),
                ('payment_date', models.DateField()),
                ('reference_number', models.CharField(blank=True, max_length=100)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=18)),
                ('remarks', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('bank_account', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='incoming_payments', to='financials.bankaccount')),
                ('business_partner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='incoming_payments', to='parties.businesspartner')),
                ('business_unit', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='incoming_payments', to='core.businessunit')),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='incoming_payments', to=settings.AUTH_USER_MODEL)),
                ('payment_method', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='incoming_payments', to='catalog.paymentmethod')),
            ],
            options={
                'db_table': 'incoming_payments',
                'ordering': ['-payment_date', '-doc_num'],
                'unique_together': {('business_unit', 'doc_num')},
            },
        ),
        migrations.CreateModel(
            name='IncomingPaymentApplication',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount_applied', models.DecimalField(decimal_places=2, max_digits=18)),
                ('ar_invoice', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payment_applications', to='sales.arinvoice')),
                ('incoming_payment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='applications', to='sales.incomingpayment')),
            ],
            options={
                'db_table': 'incoming_payment_applications',
                'ordering': ['id'],
            },
        ),
    ]
