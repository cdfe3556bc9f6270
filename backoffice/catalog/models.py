from decimal import Decimal

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from backoffice.core.models import BusinessUnit


class UoM(models.Model):
    """Unit of measure"""
    reference_cache_kind = 'uoms'

    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='uoms')
    name = models.CharField(max_length=100)
    symbol = models.CharField(max_length=20)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.symbol})"

    class Meta:
        db_table = 'uoms'
        ordering = ['name']
        unique_together = ['business_unit', 'name']


class TaxCode(models.Model):
    reference_cache_kind = 'tax_codes'

    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='tax_codes')
    code = models.CharField(max_length=50)
    description = models.CharField(max_length=255, blank=True)
    rate = models.DecimalField(
        max_digits=5, decimal_places=2,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.code} ({self.rate}%)"

    class Meta:
        db_table = 'tax_codes'
        ordering = ['code']
        unique_together = ['business_unit', 'code']


class PaymentMethod(models.Model):
    reference_cache_kind = 'payment_methods'

    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='payment_methods')
    name = models.CharField(max_length=100)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'payment_methods'
        ordering = ['name']
        unique_together = ['business_unit', 'name']


class InventoryCategory(models.Model):
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='inventory_categories')
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'inventory_categories'
        ordering = ['name']
        unique_together = ['business_unit', 'name']
        verbose_name_plural = 'Inventory categories'


class InventoryItem(models.Model):
    """A stocked raw material or product"""
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='inventory_items')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.ForeignKey(InventoryCategory, on_delete=models.PROTECT, null=True, blank=True, related_name='items')
    uom = models.ForeignKey(UoM, on_delete=models.PROTECT, related_name='inventory_items')
    standard_cost = models.DecimalField(max_digits=15, decimal_places=4, default=Decimal('0'), validators=[MinValueValidator(Decimal('0'))])
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'inventory_items'
        ordering = ['name']
        unique_together = ['business_unit', 'name']


class MenuCategory(models.Model):
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='menu_categories')
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    sort_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'menu_categories'
        ordering = ['sort_order', 'name']
        unique_together = ['business_unit', 'name']
        verbose_name_plural = 'Menu categories'


class MenuItem(models.Model):
    """A sellable item on the POS menu"""
    business_unit = models.ForeignKey(BusinessUnit, on_delete=models.CASCADE, related_name='menu_items')
    category = models.ForeignKey(MenuCategory, on_delete=models.PROTECT, related_name='items')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    image_url = models.URLField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'menu_items'
        ordering = ['name']


class Recipe(models.Model):
    """Ingredients consumed by one unit of a menu item"""
    menu_item = models.OneToOneField(MenuItem, on_delete=models.CASCADE, related_name='recipe')
    name = models.CharField(max_length=200, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name or f"Recipe for {self.menu_item.name}"

    class Meta:
        db_table = 'recipes'


class RecipeItem(models.Model):
    recipe = models.ForeignKey(Recipe, on_delete=models.CASCADE, related_name='items')
    inventory_item = models.ForeignKey(InventoryItem, on_delete=models.PROTECT, related_name='recipe_items')
    quantity_used = models.DecimalField(max_digits=12, decimal_places=4, validators=[MinValueValidator(Decimal('0'))])
    uom = models.ForeignKey(UoM, on_delete=models.PROTECT, null=True, blank=True, related_name='recipe_items')

    def __str__(self):
        return f"{self.inventory_item.name} x {self.quantity_used}"

    class Meta:
        db_table = 'recipe_items'
