from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Optional

from django.db import transaction
from django.db.models import F, Sum
from django.utils import timezone

from notifications.models import Notification, PartnerNotification
from notifications.services import create_notification, create_partner_notification

from .models import Inventory, KitDistribution, KitRequest

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    status_code = 400


class InventoryUnavailable(InventoryError):
    """The partner has no available inventory row."""
    status_code = 404


class InsufficientInventory(InventoryError):
    """The partner's available row does not hold enough kits."""
    status_code = 400


def available_inventory(partner) -> Optional[Inventory]:
    return (
        Inventory.objects.filter(partner=partner, status=Inventory.STATUS_AVAILABLE)
        .order_by("id")
        .first()
    )


def ensure_inventory(partner) -> Inventory:
    inv = available_inventory(partner)
    if inv is None:
        inv = Inventory.objects.create(partner=partner, quantity=0, distributed=0)
        logger.info("Inventory initialised for partner %s", partner.pk)
    return inv


@transaction.atomic
def add_stock(partner, quantity: int, unit_price: Decimal) -> Inventory:
    """
    Merge ``quantity`` kits into the partner's available row (created if
    absent); the row takes the latest unit price.
    """
    inv = (
        Inventory.objects.select_for_update()
        .filter(partner=partner, status=Inventory.STATUS_AVAILABLE)
        .order_by("id")
        .first()
    )
    if inv is None:
        return Inventory.objects.create(partner=partner, quantity=quantity, unit_price=unit_price)
    Inventory.objects.filter(pk=inv.pk).update(
        quantity=F("quantity") + quantity,
        unit_price=unit_price,
        last_updated=timezone.now(),
    )
    inv.refresh_from_db()
    return inv


@transaction.atomic
def distribute_kits(
    *,
    partner,
    quantity: int,
    amount_per_kit: Decimal,
    distribution_date=None,
    notes: str = "",
) -> Dict[str, object]:
    distribution = KitDistribution.objects.create(
        partner=partner,
        quantity=quantity,
        amount_per_kit=amount_per_kit,
        distribution_date=distribution_date or timezone.now(),
        notes=notes or f"Distribution of {quantity} kits at ₹{amount_per_kit} per kit",
    )
    inventory = add_stock(partner, quantity, amount_per_kit)
    create_partner_notification(
        type=PartnerNotification.KITS_DISTRIBUTED,
        message=f"{quantity} kits are distributed to '{partner.name or partner.email}' (Kit Distribution ID: {distribution.id})",
        partner=partner,
        kit_distribution=distribution,
    )
    logger.info("Distributed %s kits to partner %s (distribution %s)", quantity, partner.pk, distribution.id)
    return {"distribution": distribution, "inventory": inventory}


def inventory_summary(partner) -> Dict[str, int]:
    inv = available_inventory(partner)
    if inv is None:
        return {"available": 0, "total": 0, "distributed": 0}
    return {"available": inv.quantity, "total": inv.total, "distributed": inv.distributed}


@transaction.atomic
def request_kits(*, partner, quantity: int) -> KitRequest:
    inv = available_inventory(partner)
    if inv is None:
        raise InsufficientInventory("Inventory not initialized")
    if inv.quantity < quantity:
        raise InsufficientInventory("Not enough kits available")

    req = KitRequest.objects.create(partner=partner, quantity=quantity)
    create_notification(
        type=Notification.KIT_REQUEST,
        message=f"Partner {partner.name or partner.email} had created a kit request with ID {req.id}",
        partner=partner,
        kit_request=req,
    )
    return req


@transaction.atomic
def set_kit_request_status(request_id: int, status: str) -> KitRequest:
    """
    Raises ValueError on an unknown status and KitRequest.DoesNotExist when missing.
    """
    if status not in dict(KitRequest.STATUS_CHOICES):
        raise ValueError("Invalid status value")
    req = KitRequest.objects.select_for_update().select_related("partner").get(pk=request_id)
    req.status = status
    req.decided_at = None if status == KitRequest.STATUS_PENDING else timezone.now()
    req.save(update_fields=["status", "decided_at"])
    create_partner_notification(
        type=PartnerNotification.KIT_REQUEST_APPROVAL,
        message=f"Your kit request #{req.id} for {req.quantity} kits is {status}",
        partner=req.partner,
        kit_request=req,
    )
    return req


def consume_kit_for_sale(partner) -> Inventory:
    """
    Move one kit from in-hand to distributed on the partner's available row.

    The decrement is a single conditional UPDATE (quantity >= 1) so two
    concurrent sales can never drive the count below zero. Must run inside
    the caller's transaction.
    """
    inv = available_inventory(partner)
    if inv is None:
        raise InventoryUnavailable("Inventory not found for this partner")
    updated = Inventory.objects.filter(pk=inv.pk, quantity__gte=1).update(
        quantity=F("quantity") - 1,
        distributed=F("distributed") + 1,
        last_updated=timezone.now(),
    )
    if not updated:
        raise InsufficientInventory("Insufficient inventory")
    inv.refresh_from_db()
    return inv


def distribution_totals(partner=None) -> Dict[str, object]:
    qs = KitDistribution.objects.exclude(status="cancelled")
    if partner is not None:
        qs = qs.filter(partner=partner)
    agg = qs.aggregate(kits=Sum("quantity"), amount=Sum("total_amount"))
    return {"kits": int(agg["kits"] or 0), "amount": agg["amount"] or Decimal("0.00")}
