from decimal import Decimal

from django.db import models

from backoffice.core.models import BusinessUnit


class BusinessPartner(models.Model):
    """Customer or vendor of a business unit"""
    CUSTOMER = 'CUSTOMER'
    VENDOR = 'VENDOR'
    TYPE_CHOICES = [
        (CUSTOMER, 'Customer'),
        (VENDOR, 'Vendor'),
    ]

    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='business_partners')
    bp_code = models.CharField(max_length=50)
    name = models.CharField(max_length=200)
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    phone = models.CharField(max_length=30, blank=True)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)
    tin_id = models.CharField(max_length=50, blank=True)
    contact_person = models.CharField(max_length=100, blank=True)
    payment_terms = models.CharField(max_length=100, blank=True)
    credit_limit = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.bp_code} - {self.name}"

    class Meta:
        db_table = 'business_partners'
        ordering = ['name']
        unique_together = ['business_unit', 'bp_code']
