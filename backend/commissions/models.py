from decimal import Decimal

from django.conf import settings
from django.db import models

from .services.calculator import CANONICAL_SLABS, SlabTable


def default_slabs():
    return {key: 0 for key, _, _ in CANONICAL_SLABS}


class CommissionSlab(models.Model):
    """
    Rates (percent) per slab range for one partner, e.g. {"0-30": 5, "30-70": 7, "70-100": 10}.
    """
    partner = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='commission_slab')
    slabs = models.JSONField(default=default_slabs, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['partner_id']

    def __str__(self):
        return f"Slabs for {self.partner}"

    def table(self) -> SlabTable:
        return SlabTable.from_mapping(self.slabs)


class ManagedCommission(models.Model):
    """
    Running commission totals for a partner; rebuilt from the full sales
    history by commissions.services.ledger.recompute_partner_commission.
    """
    partner = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='managed_commission')
    current_slab = models.CharField(max_length=20, default=CANONICAL_SLABS[0][0])
    total_sales = models.PositiveIntegerField(default=0)
    eligible_sales = models.PositiveIntegerField(default=0)
    first_month_sales = models.PositiveIntegerField(default=0)
    renewal_sales = models.PositiveIntegerField(default=0)
    total_commission = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    recomputed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.partner} {self.current_slab} {self.total_commission}"


class SaleCommission(models.Model):
    managed = models.ForeignKey(ManagedCommission, on_delete=models.CASCADE, related_name='lines')
    sale = models.OneToOneField('sales.Sale', on_delete=models.CASCADE, related_name='commission_line')
    sale_date = models.DateTimeField()
    first_month_subscription = models.BooleanField(default=False)
    amount_charged_first_month = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    renewal_second_month = models.BooleanField(default=False)
    amount_charged_second_month = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    eligible_count = models.PositiveIntegerField(default=0)
    slab = models.CharField(max_length=20)
    rate = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('0.00'))
    first_month_commission = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    renewal_commission = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    commission = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    class Meta:
        ordering = ['sale_date', 'sale_id']

    def __str__(self):
        return f"Sale #{self.sale_id} {self.slab} {self.commission}"
