import logging
from threading import Thread
from typing import Iterable

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction

logger = logging.getLogger(__name__)


def send_portal_mail(subject: str, message: str, recipients: Iterable[str]) -> bool:
    """
    Send a plain-text mail after the current transaction commits.

    Skipped (returns False) when MAIL_ENABLED is off or there is no recipient.
    Delivery runs on a daemon thread unless MAIL_ASYNC is off, so SMTP latency
    never holds a request worker. Failures are logged, never raised.
    """
    to = [r for r in (recipients or []) if r]
    if not to or not getattr(settings, "MAIL_ENABLED", False):
        return False

    sender = getattr(settings, "DEFAULT_FROM_EMAIL", None) or getattr(settings, "EMAIL_HOST_USER", None)

    def _send():
        try:
            send_mail(subject, message, sender, to, fail_silently=False)
        except Exception as e:
            logger.warning("Mail '%s' to %s failed: %s", subject, to, e)

    def _dispatch():
        if getattr(settings, "MAIL_ASYNC", True):
            Thread(target=_send, daemon=True).start()
        else:
            _send()

    transaction.on_commit(_dispatch)
    return True
