import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from notifications.services import NotificationError

logger = logging.getLogger(__name__)


def portal_exception_handler(exc, context):
    """
    DRF's handler plus a JSON body for notification write failures, which
    bubble out of the service-layer transactions after they roll back.
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response
    if isinstance(exc, NotificationError):
        view = context.get("view")
        logger.error("Notification failed in %s: %s", type(view).__name__, exc)
        return Response({"error": str(exc)}, status=500)
    return None
