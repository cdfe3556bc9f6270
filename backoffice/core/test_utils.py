"""
Test utilities and factories for creating test data
"""
import random
import string
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from backoffice.core.models import BusinessUnit, Role, UserBusinessUnit
from backoffice.catalog.models import (
    UoM, PaymentMethod, InventoryCategory, InventoryItem, MenuCategory, MenuItem, Recipe, RecipeItem
)
from backoffice.financials.models import (
    AccountType, GLAccount, AccountingPeriod, NumberingSeries, JournalEntry, JournalEntryLine, BankAccount
)
from backoffice.inventory.models import InventoryLocation, InventoryStock
from backoffice.parties.models import BusinessPartner
from backoffice.pos.models import POSConfiguration, MenuItemGLMapping, PaymentMethodGLMapping, Table

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, password='testpass123', is_staff=False, is_superuser=False, name=''):
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        return User.objects.create_user(
            username=username,
            email=f'{username}@test.com',
            password=password,
            name=name,
            is_staff=is_staff,
            is_superuser=is_superuser,
        )

    @staticmethod
    def create_business_unit(name=None, code=None):
        if not code:
            code = f'BU_{TestDataFactory.random_string(6).upper()}'
        return BusinessUnit.objects.create(name=name or f'Unit {code}', code=code)

    @staticmethod
    def create_role(name):
        role, _ = Role.objects.get_or_create(name=name)
        return role

    @staticmethod
    def assign(user, business_unit, role_name=Role.ADMIN):
        """Give the user a role in the business unit"""
        return UserBusinessUnit.objects.create(
            user=user, business_unit=business_unit, role=TestDataFactory.create_role(role_name)
        )

    @staticmethod
    def account_type(name):
        account_type, _ = AccountType.objects.get_or_create(
            name=name, defaults={'default_normal_balance': AccountType.DEFAULT_NORMAL_BALANCES[name]}
        )
        return account_type

    @staticmethod
    def create_gl_account(business_unit, account_code, name=None, type_name=AccountType.ASSET, **kwargs):
        account_type = TestDataFactory.account_type(type_name)
        return GLAccount.objects.create(
            business_unit=business_unit,
            account_code=account_code,
            name=name or f'Account {account_code}',
            account_type=account_type,
            normal_balance=kwargs.pop('normal_balance', account_type.default_normal_balance),
            **kwargs
        )

    @staticmethod
    def create_period(business_unit, start_date=None, end_date=None, status=AccountingPeriod.OPEN):
        """Yearly period covering the current year unless dates are given"""
        today = date.today()
        start_date = start_date or date(today.year, 1, 1)
        end_date = end_date or date(today.year, 12, 31)
        return AccountingPeriod.objects.create(
            business_unit=business_unit,
            name=f'FY {start_date.year}',
            start_date=start_date,
            end_date=end_date,
            fiscal_year=start_date.year,
            period_number=1,
            type=AccountingPeriod.YEARLY,
            status=status,
        )

    @staticmethod
    def create_series(business_unit, document_type, prefix=None, next_number=1):
        return NumberingSeries.objects.create(
            business_unit=business_unit,
            name=document_type.replace('_', ' ').title(),
            prefix=prefix or NumberingSeries.DEFAULT_PREFIXES[document_type],
            document_type=document_type,
            next_number=next_number,
        )

    @staticmethod
    def create_all_series(business_unit):
        return {
            document_type: TestDataFactory.create_series(business_unit, document_type)
            for document_type, _ in NumberingSeries.DOCUMENT_TYPE_CHOICES
        }

    @staticmethod
    def create_posted_entry(business_unit, author, lines, posting_date=None, period=None):
        """
        Posted journal entry from ``(account, debit, credit)`` tuples.

        Account balances are not touched; use the posting service when they matter.
        """
        posting_date = posting_date or date.today()
        period = period or AccountingPeriod.objects.filter(
            business_unit=business_unit, start_date__lte=posting_date, end_date__gte=posting_date
        ).first() or TestDataFactory.create_period(business_unit)
        entry = JournalEntry.objects.create(
            business_unit=business_unit,
            doc_num=f'JE-{TestDataFactory.random_string(6).upper()}',
            posting_date=posting_date,
            accounting_period=period,
            approval_workflow_status=JournalEntry.APPROVED,
            is_posted=True,
            author=author,
        )
        for account, debit, credit in lines:
            JournalEntryLine.objects.create(
                journal_entry=entry, gl_account=account, debit=Decimal(debit), credit=Decimal(credit)
            )
        return entry

    @staticmethod
    def create_bank_account(business_unit, gl_account, name='Operating Account'):
        return BankAccount.objects.create(
            business_unit=business_unit,
            name=name,
            bank_name='Test Bank',
            account_number=TestDataFactory.random_string(10),
            gl_account=gl_account,
        )

    @staticmethod
    def create_partner(business_unit, type=BusinessPartner.CUSTOMER, bp_code=None, name=None):
        if not bp_code:
            prefix = 'C' if type == BusinessPartner.CUSTOMER else 'V'
            bp_code = f'{prefix}{TestDataFactory.random_string(6).upper()}'
        return BusinessPartner.objects.create(
            business_unit=business_unit, bp_code=bp_code, name=name or f'Partner {bp_code}', type=type
        )

    @staticmethod
    def create_uom(business_unit, name='Piece', symbol='pc'):
        return UoM.objects.create(business_unit=business_unit, name=name, symbol=symbol)

    @staticmethod
    def create_payment_method(business_unit, name='Cash'):
        return PaymentMethod.objects.create(business_unit=business_unit, name=name)

    @staticmethod
    def create_inventory_item(business_unit, name=None, standard_cost='10.00', uom=None, category=None):
        return InventoryItem.objects.create(
            business_unit=business_unit,
            name=name or f'Item_{TestDataFactory.random_string(6)}',
            uom=uom or TestDataFactory.create_uom(
                business_unit, name=f'UoM_{TestDataFactory.random_string(6)}', symbol=TestDataFactory.random_string(4)
            ),
            category=category,
            standard_cost=Decimal(standard_cost),
        )

    @staticmethod
    def create_inventory_category(business_unit, name=None):
        return InventoryCategory.objects.create(
            business_unit=business_unit, name=name or f'Category_{TestDataFactory.random_string(6)}'
        )

    @staticmethod
    def create_menu_item(business_unit, name=None, price='100.00', category=None):
        if category is None:
            category = MenuCategory.objects.create(
                business_unit=business_unit, name=f'Menu_{TestDataFactory.random_string(6)}'
            )
        return MenuItem.objects.create(
            business_unit=business_unit,
            category=category,
            name=name or f'Dish_{TestDataFactory.random_string(6)}',
            price=Decimal(price),
        )

    @staticmethod
    def create_recipe(menu_item, ingredients):
        """Recipe from ``(inventory_item, quantity_used)`` pairs"""
        recipe = Recipe.objects.create(menu_item=menu_item, name=f'{menu_item.name} recipe')
        for inventory_item, quantity in ingredients:
            RecipeItem.objects.create(recipe=recipe, inventory_item=inventory_item, quantity_used=Decimal(quantity))
        return recipe

    @staticmethod
    def create_location(business_unit, name=None):
        return InventoryLocation.objects.create(
            business_unit=business_unit, name=name or f'Location_{TestDataFactory.random_string(6)}'
        )

    @staticmethod
    def create_stock(inventory_item, location, quantity='0', reorder_point='0'):
        return InventoryStock.objects.create(
            inventory_item=inventory_item,
            location=location,
            quantity_on_hand=Decimal(quantity),
            reorder_point=Decimal(reorder_point),
        )

    @staticmethod
    def create_table(business_unit, table_number=None, capacity=4):
        return Table.objects.create(
            business_unit=business_unit,
            table_number=table_number or TestDataFactory.random_string(4),
            capacity=capacity,
        )

    @staticmethod
    def create_pos_setup(business_unit, **config):
        """
        Chart of accounts, series, POS configuration and a cash payment method
        with its GL mapping. Returns a dict of the created objects.
        """
        cash = TestDataFactory.create_gl_account(business_unit, '1000', 'Cash on Hand')
        receivable = TestDataFactory.create_gl_account(business_unit, '1100', 'Accounts Receivable')
        inventory = TestDataFactory.create_gl_account(business_unit, '1200', 'Inventory')
        tax = TestDataFactory.create_gl_account(business_unit, '2100', 'Output VAT', AccountType.LIABILITY)
        revenue = TestDataFactory.create_gl_account(business_unit, '4000', 'Food Sales', AccountType.REVENUE)
        discounts = TestDataFactory.create_gl_account(business_unit, '4900', 'Sales Discounts', AccountType.REVENUE)
        cogs = TestDataFactory.create_gl_account(business_unit, '5000', 'Cost of Sales', AccountType.EXPENSE)

        period = TestDataFactory.create_period(business_unit)
        ar_series = TestDataFactory.create_series(business_unit, NumberingSeries.AR_INVOICE)
        je_series = TestDataFactory.create_series(business_unit, NumberingSeries.JOURNAL_ENTRY)
        customer = TestDataFactory.create_partner(business_unit, bp_code='WALKIN', name='Walk-in Customer')

        defaults = {
            'auto_post_to_gl': False,
            'sales_revenue_account': revenue,
            'sales_tax_account': tax,
            'cash_account': cash,
            'discount_account': discounts,
            'default_customer_bp_code': customer.bp_code,
            'ar_invoice_series': ar_series,
            'journal_entry_series': je_series,
        }
        defaults.update(config)
        configuration = POSConfiguration.objects.create(business_unit=business_unit, **defaults)

        payment_method = TestDataFactory.create_payment_method(business_unit)
        PaymentMethodGLMapping.objects.create(
            business_unit=business_unit, payment_method=payment_method, gl_account=cash
        )
        return {
            'configuration': configuration,
            'period': period,
            'customer': customer,
            'payment_method': payment_method,
            'accounts': {
                'cash': cash, 'receivable': receivable, 'inventory': inventory, 'tax': tax,
                'revenue': revenue, 'discounts': discounts, 'cogs': cogs,
            },
        }

    @staticmethod
    def map_menu_item(menu_item, sales_account=None, cogs_account=None, inventory_account=None):
        return MenuItemGLMapping.objects.create(
            business_unit=menu_item.business_unit,
            menu_item=menu_item,
            sales_account=sales_account,
            cogs_account=cogs_account,
            inventory_account=inventory_account,
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
