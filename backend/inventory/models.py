from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Inventory(models.Model):
    STATUS_AVAILABLE = 'available'
    STATUS_CHOICES = [
        (STATUS_AVAILABLE, 'Available'),
        ('allocated', 'Allocated'),
        ('distributed', 'Distributed'),
    ]

    partner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='inventories')
    # kits still in hand; sales move one unit from quantity to distributed
    quantity = models.PositiveIntegerField(default=0)
    distributed = models.PositiveIntegerField(default=0)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_AVAILABLE, db_index=True)
    last_updated = models.DateTimeField(auto_now=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-last_updated', '-id']
        verbose_name_plural = 'Inventory'

    def __str__(self):
        return f"{self.partner} {self.status}: {self.quantity} in hand, {self.distributed} sold"

    @property
    def total(self) -> int:
        return self.quantity + self.distributed


class KitDistribution(models.Model):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    partner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='kit_distributions')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    amount_per_kit = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    distribution_date = models.DateTimeField(default=timezone.now, db_index=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='completed')
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ['-distribution_date', '-id']

    def __str__(self):
        return f"{self.quantity} kits to {self.partner} on {self.distribution_date:%Y-%m-%d}"

    def save(self, *args, **kwargs):
        self.total_amount = (Decimal(self.quantity or 0) * Decimal(str(self.amount_per_kit or 0))).quantize(Decimal('0.01'))
        super().save(*args, **kwargs)


class KitRequest(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
    ]

    partner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='kit_requests')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    date = models.DateTimeField(default=timezone.now)
    decided_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-date', '-id']

    def __str__(self):
        return f"KitRequest #{self.pk} {self.partner} x{self.quantity} [{self.status}]"
