from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone


class Sale(models.Model):
    YES = 'yes'
    NO = 'no'
    YES_NO = [(YES, 'Yes'), (NO, 'No')]

    lead = models.ForeignKey('leads.Lead', on_delete=models.PROTECT, related_name='sales')
    partner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='sales')
    quantity = models.PositiveIntegerField(default=1)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    first_month_subscription = models.CharField(max_length=3, choices=YES_NO, default=NO)
    amount_charged_first_month = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    renewal_second_month = models.CharField(max_length=3, choices=YES_NO, default=NO)
    amount_charged_second_month = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    date = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['-date', '-id']
        indexes = [
            models.Index(fields=['partner', 'date'], name='sale_partner_date_idx'),
        ]

    def __str__(self):
        return f"Sale #{self.pk} lead={self.lead_id} partner={self.partner_id}"

    @property
    def has_first_month(self) -> bool:
        return self.first_month_subscription == self.YES

    @property
    def has_renewal(self) -> bool:
        return self.renewal_second_month == self.YES

    def as_facts(self):
        from commissions.services.calculator import SaleFacts
        return SaleFacts(
            id=self.id,
            date=self.date,
            amount=self.amount,
            first_month=self.has_first_month,
            amount_first_month=self.amount_charged_first_month,
            renewal=self.has_renewal,
            amount_second_month=self.amount_charged_second_month,
        )
