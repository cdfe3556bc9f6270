from django.urls import path
from .views import (
    account_type_list, account_category_list_create,
    gl_account_list_create, gl_account_detail,
    accounting_period_list_create, accounting_period_detail,
    numbering_series_list_create, numbering_series_detail,
    journal_entry_list_create, journal_entry_detail,
    journal_entry_submit, journal_entry_approve, journal_entry_reject, journal_entry_post,
    bank_account_list_create, bank_account_detail,
    financial_setup
)

urlpatterns = [
    # Chart of accounts
    path('account-types/', account_type_list, name='account-type-list'),
    path('account-categories/', account_category_list_create, name='account-category-list-create'),
    path('gl-accounts/', gl_account_list_create, name='gl-account-list-create'),
    path('gl-accounts/<int:pk>/', gl_account_detail, name='gl-account-detail'),

    # Periods and numbering
    path('accounting-periods/', accounting_period_list_create, name='accounting-period-list-create'),
    path('accounting-periods/<int:pk>/', accounting_period_detail, name='accounting-period-detail'),
    path('numbering-series/', numbering_series_list_create, name='numbering-series-list-create'),
    path('numbering-series/<int:pk>/', numbering_series_detail, name='numbering-series-detail'),

    # Journal entries
    path('journal-entries/', journal_entry_list_create, name='journal-entry-list-create'),
    path('journal-entries/<int:pk>/', journal_entry_detail, name='journal-entry-detail'),
    path('journal-entries/<int:pk>/submit/', journal_entry_submit, name='journal-entry-submit'),
    path('journal-entries/<int:pk>/approve/', journal_entry_approve, name='journal-entry-approve'),
    path('journal-entries/<int:pk>/reject/', journal_entry_reject, name='journal-entry-reject'),
    path('journal-entries/<int:pk>/post/', journal_entry_post, name='journal-entry-post'),

    # Bank accounts
    path('bank-accounts/', bank_account_list_create, name='bank-account-list-create'),
    path('bank-accounts/<int:pk>/', bank_account_detail, name='bank-account-detail'),

    path('financial-setup/', financial_setup, name='financial-setup'),
]
