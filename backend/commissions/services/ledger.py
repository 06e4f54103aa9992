from __future__ import annotations

import logging
from typing import List, Tuple

from django.db import transaction
from django.utils import timezone

from commissions.models import CommissionSlab, ManagedCommission, SaleCommission, default_slabs
from commissions.services.calculator import (
    CommissionBreakdown,
    SaleFacts,
    SlabTable,
    compute_breakdown,
)
from sales.models import Sale

logger = logging.getLogger(__name__)


class CommissionNotConfigured(Exception):
    """Raised when a partner has no slab row yet."""

    def __init__(self, message="Commission slab not alloted. Please contact admin"):
        super().__init__(message)


def ensure_commission_slab(partner) -> CommissionSlab:
    slab, created = CommissionSlab.objects.get_or_create(partner=partner, defaults={"slabs": default_slabs()})
    if created:
        logger.info("Commission slab initialised for partner %s", partner.pk)
    return slab


def load_slab_table(partner) -> SlabTable:
    slab = CommissionSlab.objects.filter(partner=partner).first()
    if slab is None:
        raise CommissionNotConfigured()
    return slab.table()


def sale_facts_for_partner(partner) -> List[SaleFacts]:
    return [sale.as_facts() for sale in Sale.objects.filter(partner=partner).order_by("date", "id")]


def upsert_slabs(partner, slabs) -> CommissionSlab:
    """
    Validate and store a partner's slab rates. Raises CommissionConfigError on bad input.
    """
    table = SlabTable.from_mapping(slabs)
    obj, _ = CommissionSlab.objects.update_or_create(partner=partner, defaults={"slabs": table.as_mapping()})
    return obj


def recompute_partner_commission(partner) -> Tuple[ManagedCommission, CommissionBreakdown]:
    """
    Rebuild the partner's commission ledger from the full sales history.

    Runs under one transaction with the partner's ManagedCommission row
    locked, so two concurrent sale updates serialize instead of interleaving.
    Every SaleCommission line is recreated, which keeps repeated calls
    idempotent.
    """
    table = load_slab_table(partner)

    with transaction.atomic():
        managed, _ = ManagedCommission.objects.get_or_create(partner=partner)
        managed = ManagedCommission.objects.select_for_update().get(pk=managed.pk)

        sales = {s.id: s for s in Sale.objects.filter(partner=partner)}
        breakdown = compute_breakdown(table, [s.as_facts() for s in sales.values()])

        SaleCommission.objects.filter(managed=managed).delete()
        SaleCommission.objects.bulk_create([
            SaleCommission(
                managed=managed,
                sale_id=line.sale_id,
                sale_date=line.date,
                first_month_subscription=sales[line.sale_id].has_first_month,
                amount_charged_first_month=sales[line.sale_id].amount_charged_first_month,
                renewal_second_month=sales[line.sale_id].has_renewal,
                amount_charged_second_month=sales[line.sale_id].amount_charged_second_month,
                eligible_count=line.eligible_count,
                slab=line.slab,
                rate=line.rate,
                first_month_commission=line.first_month_commission,
                renewal_commission=line.renewal_commission,
                commission=line.total,
            )
            for line in breakdown.lines
        ])

        managed.current_slab = breakdown.current_slab
        managed.total_sales = breakdown.total_sales
        managed.eligible_sales = breakdown.eligible_sales
        managed.first_month_sales = breakdown.first_month_sales
        managed.renewal_sales = breakdown.renewal_sales
        managed.total_commission = breakdown.total_commission
        managed.recomputed_at = timezone.now()
        managed.save()

    logger.info(
        "Commission recomputed for partner %s: %s sales, slab %s, total %s",
        partner.pk, breakdown.total_sales, breakdown.current_slab, breakdown.total_commission,
    )
    return managed, breakdown
