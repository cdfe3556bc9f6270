from decimal import Decimal

from rest_framework import serializers

from backoffice.core.serializers import BusinessUnitScopedMixin
from .models import (
    AccountType, AccountCategory, GLAccount, AccountingPeriod, NumberingSeries,
    JournalEntry, JournalEntryLine, BankAccount, NORMAL_BALANCE_CHOICES
)


class AccountTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = AccountType
        fields = ['id', 'name', 'default_normal_balance']


class AccountCategorySerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    account_type_name = serializers.CharField(source='account_type.name', read_only=True)

    class Meta:
        model = AccountCategory
        fields = ['id', 'name', 'code', 'account_type', 'account_type_name', 'description', 'created_at']


class GLAccountSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    account_type_name = serializers.CharField(source='account_type.name', read_only=True)
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    normal_balance = serializers.ChoiceField(choices=NORMAL_BALANCE_CHOICES, required=False)

    class Meta:
        model = GLAccount
        fields = ['id', 'account_code', 'name', 'account_type', 'account_type_name', 'category', 'category_name',
                  'normal_balance', 'balance', 'description', 'is_control_account', 'is_active',
                  'created_at', 'updated_at']
        read_only_fields = ['balance']

    def validate(self, attrs):
        category = attrs.get('category')
        account_type = attrs.get('account_type') or getattr(self.instance, 'account_type', None)
        if category and account_type and category.account_type_id != account_type.id:
            raise serializers.ValidationError({'category': 'Category belongs to a different account type'})
        return attrs

    def create(self, validated_data):
        if not validated_data.get('normal_balance'):
            validated_data['normal_balance'] = validated_data['account_type'].default_normal_balance
        return super().create(validated_data)


class AccountingPeriodSerializer(serializers.ModelSerializer):
    class Meta:
        model = AccountingPeriod
        fields = ['id', 'name', 'start_date', 'end_date', 'fiscal_year', 'period_number', 'type', 'status',
                  'created_at', 'updated_at']

    def validate(self, attrs):
        start_date = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end_date = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start_date and end_date and end_date <= start_date:
            raise serializers.ValidationError({'end_date': 'End date must be after start date'})
        return attrs


class NumberingSeriesSerializer(serializers.ModelSerializer):
    next_document_number = serializers.SerializerMethodField()

    class Meta:
        model = NumberingSeries
        fields = ['id', 'name', 'prefix', 'next_number', 'document_type', 'next_document_number',
                  'created_at', 'updated_at']

    def get_next_document_number(self, obj):
        from .services import format_document_number
        return format_document_number(obj.prefix, obj.next_number)


class JournalEntryLineSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    account_code = serializers.CharField(source='gl_account.account_code', read_only=True)
    account_name = serializers.CharField(source='gl_account.name', read_only=True)
    debit = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal('0'), default=Decimal('0'))
    credit = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=Decimal('0'), default=Decimal('0'))

    class Meta:
        model = JournalEntryLine
        fields = ['id', 'gl_account', 'account_code', 'account_name', 'debit', 'credit', 'description']

    def validate(self, attrs):
        debit = attrs.get('debit', Decimal('0'))
        credit = attrs.get('credit', Decimal('0'))
        if (debit > 0) == (credit > 0):
            raise serializers.ValidationError('Each line must have either a debit or a credit amount')
        return attrs


class JournalEntrySerializer(serializers.ModelSerializer):
    lines = JournalEntryLineSerializer(many=True, read_only=True)
    author_name = serializers.CharField(source='author.get_display_name', read_only=True)
    posted_by_name = serializers.CharField(source='posted_by.get_display_name', read_only=True, default=None)
    accounting_period_name = serializers.CharField(source='accounting_period.name', read_only=True)
    total_debit = serializers.SerializerMethodField()
    total_credit = serializers.SerializerMethodField()

    class Meta:
        model = JournalEntry
        fields = ['id', 'doc_num', 'posting_date', 'document_date', 'memo', 'reference_number',
                  'accounting_period', 'accounting_period_name', 'approval_workflow_status',
                  'is_posted', 'posted_at', 'posted_by', 'posted_by_name', 'author', 'author_name',
                  'lines', 'total_debit', 'total_credit', 'created_at', 'updated_at']

    def get_total_debit(self, obj):
        return str(obj.get_total_debit())

    def get_total_credit(self, obj):
        return str(obj.get_total_credit())


class JournalEntryCreateSerializer(serializers.Serializer):
    posting_date = serializers.DateField()
    document_date = serializers.DateField(required=False, allow_null=True)
    memo = serializers.CharField(required=False, allow_blank=True)
    reference_number = serializers.CharField(max_length=100, required=False, allow_blank=True)
    lines = JournalEntryLineSerializer(many=True)

    def validate_lines(self, value):
        if len(value) < 2:
            raise serializers.ValidationError('Journal entry requires at least 2 lines')
        return value


class BankAccountSerializer(BusinessUnitScopedMixin, serializers.ModelSerializer):
    gl_account_code = serializers.CharField(source='gl_account.account_code', read_only=True)
    gl_account_name = serializers.CharField(source='gl_account.name', read_only=True)

    class Meta:
        model = BankAccount
        fields = ['id', 'name', 'bank_name', 'account_number', 'gl_account', 'gl_account_code', 'gl_account_name',
                  'currency', 'iban', 'swift_code', 'branch', 'created_at', 'updated_at']


# Financial setup wizard input
class SetupCategorySerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    account_type = serializers.ChoiceField(choices=AccountType.NAME_CHOICES)
    description = serializers.CharField(required=False, allow_blank=True)


class SetupGLAccountSerializer(serializers.Serializer):
    account_code = serializers.CharField(max_length=20)
    name = serializers.CharField(max_length=200)
    account_type = serializers.ChoiceField(choices=AccountType.NAME_CHOICES)
    category_name = serializers.CharField(required=False, allow_blank=True)
    normal_balance = serializers.ChoiceField(choices=NORMAL_BALANCE_CHOICES, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    is_control_account = serializers.BooleanField(required=False, default=False)


class SetupPeriodSerializer(AccountingPeriodSerializer):
    class Meta(AccountingPeriodSerializer.Meta):
        fields = ['name', 'start_date', 'end_date', 'fiscal_year', 'period_number', 'type', 'status']


class SetupSeriesSerializer(serializers.ModelSerializer):
    class Meta:
        model = NumberingSeries
        fields = ['name', 'prefix', 'next_number', 'document_type']


class SetupBankAccountSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    bank_name = serializers.CharField(max_length=100)
    account_number = serializers.CharField(max_length=50)
    gl_account_name = serializers.CharField()
    currency = serializers.CharField(max_length=3, required=False, default='PHP')
    iban = serializers.CharField(max_length=34, required=False, allow_blank=True)
    swift_code = serializers.CharField(max_length=11, required=False, allow_blank=True)
    branch = serializers.CharField(max_length=100, required=False, allow_blank=True)


class FinancialSetupSerializer(serializers.Serializer):
    account_categories = SetupCategorySerializer(many=True, required=False)
    gl_accounts = SetupGLAccountSerializer(many=True, required=False)
    accounting_periods = SetupPeriodSerializer(many=True, required=False)
    numbering_series = SetupSeriesSerializer(many=True, required=False)
    bank_accounts = SetupBankAccountSerializer(many=True, required=False)
