from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction

from inventory.services import available_inventory, consume_kit_for_sale, InsufficientInventory, InventoryUnavailable
from leads.models import Lead
from notifications.models import Notification
from notifications.services import create_notification

from .models import Sale

logger = logging.getLogger(__name__)


class SaleError(Exception):
    status_code = 400


class LeadNotAssigned(SaleError):
    status_code = 404


def record_sale(
    *,
    partner,
    lead_id: int,
    amount: Decimal,
    address: Optional[str] = None,
    state: Optional[str] = None,
    pincode: Optional[str] = None,
) -> Sale:
    """
    Convert an assigned lead into a sale.

    Inventory is checked up front so the caller gets "no inventory" (404) or
    "empty" (400) before anything is written; the decrement itself is the
    conditional update in consume_kit_for_sale, all in one transaction.
    """
    inv = available_inventory(partner)
    if inv is None:
        raise InventoryUnavailable("No available inventory found for this partner")
    if inv.quantity < 1:
        raise InsufficientInventory("Insufficient inventory for this sale")

    with transaction.atomic():
        lead = Lead.objects.select_for_update().filter(pk=lead_id, assigned_to=partner).first()
        if lead is None:
            raise LeadNotAssigned("Lead not found or unauthorized")

        fields = ["status", "updated_at"]
        for attr, value in (("address", address), ("state", state), ("pincode", pincode)):
            if value is not None:
                setattr(lead, attr, str(value).strip())
                fields.append(attr)
        lead.status = Lead.STATUS_SUCCESSFUL
        lead.save(update_fields=fields)

        sale = Sale.objects.create(
            lead=lead,
            partner=partner,
            amount=amount,
            first_month_subscription=Sale.NO,
            renewal_second_month=Sale.NO,
        )
        consume_kit_for_sale(partner)
        create_notification(
            type=Notification.SALE_RECORDED,
            message=f"Sale done to {lead.name} with amount {sale.amount} has been updated (Sale ID: {sale.id})",
            partner=partner,
            lead=lead,
            sale=sale,
        )

    logger.info("Sale %s recorded for partner %s on lead %s", sale.id, partner.pk, lead.id)
    return sale


def update_subscription(*, sale: Sale, first_month: str, amount_first_month, renewal: str, amount_second_month) -> Sale:
    sale.first_month_subscription = first_month
    sale.amount_charged_first_month = amount_first_month
    sale.renewal_second_month = renewal
    sale.amount_charged_second_month = amount_second_month
    sale.save(update_fields=[
        "first_month_subscription",
        "amount_charged_first_month",
        "renewal_second_month",
        "amount_charged_second_month",
    ])
    return sale
