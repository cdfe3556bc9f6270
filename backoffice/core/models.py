from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Extended user model with a display name"""
    name = models.CharField(max_length=150, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'

    def get_display_name(self):
        return self.name or self.get_full_name() or self.username


class BusinessUnit(models.Model):
    """A tenant: every business document belongs to exactly one business unit"""
    name = models.CharField(max_length=200)
    code = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'business_units'
        ordering = ['name']


class Role(models.Model):
    ADMIN = 'Admin'
    MANAGER = 'Manager'
    SUPERVISOR = 'Supervisor'
    CASHIER = 'Cashier'
    STAFF = 'Staff'

    name = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'roles'
        ordering = ['name']


class UserBusinessUnit(models.Model):
    """Assignment of a user to a business unit with a role"""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='assignments')
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='assignments')
    role = models.ForeignKey(Role, on_delete=models.PROTECT, related_name='assignments')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user.username} @ {self.business_unit.code} ({self.role.name})"

    class Meta:
        db_table = 'user_business_units'
        unique_together = ['user', 'business_unit']


class AuditLog(models.Model):
    """Audit log for critical operations"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('approve', 'Approve'),
        ('reject', 'Reject'),
        ('close', 'Close'),
        ('post', 'Post'),
        ('receive', 'Goods Received'),
        ('stock_adjust', 'Stock Adjustment'),
        ('stock_transfer', 'Stock Transfer'),
        ('settle', 'Order Settled'),
        ('payment_add', 'Payment Added'),
        ('password_change', 'Password Changed'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.SET_NULL, null=True, blank=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object")
    object_reference = models.CharField(max_length=255, blank=True, null=True, help_text="Document number if applicable")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='audit_logs_created_7c1f0e_idx'),
            models.Index(fields=['action'], name='audit_logs_action_3a9b2d_idx'),
            models.Index(fields=['model_name'], name='audit_logs_model_n_5e4c81_idx'),
            models.Index(fields=['object_reference'], name='audit_logs_object__9d2e6a_idx'),
        ]
