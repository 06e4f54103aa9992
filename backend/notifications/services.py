from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings
from django.db import DatabaseError

from .models import Notification, PartnerNotification

logger = logging.getLogger(__name__)


class NotificationError(RuntimeError):
    pass


def _enabled() -> bool:
    return bool(getattr(settings, "NOTIFICATIONS_ENABLED", True))


def create_notification(
    *,
    type: str,
    message: str,
    partner,
    lead=None,
    sale=None,
    kit_request=None,
) -> Optional[Notification]:
    """
    Append an entry to the admin activity feed.
    Returns None when notifications are switched off.
    """
    if not _enabled():
        return None
    if type not in dict(Notification.TYPE_CHOICES):
        raise NotificationError(f"Unknown notification type: {type}")
    try:
        return Notification.objects.create(
            type=type,
            message=message,
            partner=partner,
            lead=lead,
            sale=sale,
            kit_request=kit_request,
        )
    except DatabaseError as e:
        logger.exception("Admin notification %s for partner %s failed", type, getattr(partner, "pk", None))
        raise NotificationError(str(e)) from e


def create_partner_notification(
    *,
    type: str,
    message: str,
    partner,
    lead=None,
    kit_distribution=None,
    kit_request=None,
) -> Optional[PartnerNotification]:
    if not _enabled():
        return None
    if type not in dict(PartnerNotification.TYPE_CHOICES):
        raise NotificationError(f"Unknown partner notification type: {type}")
    if partner is None:
        raise NotificationError("Partner notification requires a partner")
    try:
        return PartnerNotification.objects.create(
            type=type,
            message=message,
            partner=partner,
            lead=lead,
            kit_distribution=kit_distribution,
            kit_request=kit_request,
        )
    except DatabaseError as e:
        logger.exception("Partner notification %s for partner %s failed", type, partner.pk)
        raise NotificationError(str(e)) from e
