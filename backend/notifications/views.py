from django.utils import timezone
from rest_framework.views import APIView
from rest_framework.generics import ListAPIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from accounts.permissions import IsAdminRole

from .models import Notification, PartnerNotification
from .serializers import NotificationSerializer, PartnerNotificationSerializer


def _paginate(view, request, qs):
    try:
        page = int(request.query_params.get("page") or 1)
    except (TypeError, ValueError):
        page = 1
    try:
        page_size = int(request.query_params.get("page_size") or 25)
    except (TypeError, ValueError):
        page_size = 25
    page = max(1, page)
    page_size = max(1, min(page_size, 200))
    total = qs.count()
    start = (page - 1) * page_size
    ser = view.get_serializer(qs[start:start + page_size], many=True)
    return Response({"count": total, "results": ser.data}, status=200)


def _filter_read(request, qs):
    read = (request.query_params.get("read") or "").strip().lower()
    if read in ("1", "true", "yes", "read"):
        return qs.filter(read_at__isnull=False)
    if read in ("0", "false", "no", "unread"):
        return qs.filter(read_at__isnull=True)
    return qs


def _mark_read(request, qs):
    data = request.data or {}
    ids = data.get("ids") or []
    mark_all = bool(data.get("all"))

    qs = qs.filter(read_at__isnull=True)
    if ids and isinstance(ids, list):
        ids = [int(x) for x in ids if str(x).isdigit()]
        qs = qs.filter(id__in=ids)
    elif not mark_all:
        return Response({"detail": "Provide ids or set all=true"}, status=400)

    updated = qs.update(read_at=timezone.now())
    return Response({"updated": int(updated)}, status=200)


class AdminFeedListView(ListAPIView):
    """
    GET /api/notifications/
    Admin activity feed, newest first.
    Query params:
      - page (default 1), page_size (default 25, max 200)
      - read: 1|true => only read, 0|false|unread => only unread
      - type: LEAD_STATUS_UPDATE | SALE_RECORDED | KIT_REQUEST
      - partnerId: only entries about that partner
    """
    permission_classes = [IsAdminRole]
    serializer_class = NotificationSerializer

    def get_queryset(self):
        qs = Notification.objects.select_related("partner").order_by("-timestamp", "-id")
        qs = _filter_read(self.request, qs)
        t = (self.request.query_params.get("type") or "").strip().upper()
        if t:
            qs = qs.filter(type=t)
        partner_id = (self.request.query_params.get("partnerId") or "").strip()
        if partner_id.isdigit():
            qs = qs.filter(partner_id=int(partner_id))
        return qs

    def list(self, request, *args, **kwargs):
        return _paginate(self, request, self.get_queryset())


class AdminFeedMarkReadView(APIView):
    """
    PATCH: {"ids": [1,2]} or {"all": true}
    """
    permission_classes = [IsAdminRole]

    def patch(self, request):
        return _mark_read(request, Notification.objects.all())


class AdminFeedUnreadCountView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        c = Notification.objects.filter(read_at__isnull=True).count()
        return Response({"unread": c}, status=200)


class PartnerNotificationListView(ListAPIView):
    """
    GET /api/partner-notifications/
    A partner sees their own notifications; an admin may pass ?id=<partner>.
    """
    permission_classes = [IsAuthenticated]
    serializer_class = PartnerNotificationSerializer

    def get_queryset(self):
        user = self.request.user
        qs = PartnerNotification.objects.order_by("-timestamp", "-id")
        partner_id = (self.request.query_params.get("id") or "").strip()
        if user.is_portal_admin:
            if partner_id.isdigit():
                qs = qs.filter(partner_id=int(partner_id))
        else:
            qs = qs.filter(partner=user)
        return _filter_read(self.request, qs)

    def list(self, request, *args, **kwargs):
        return _paginate(self, request, self.get_queryset())


class PartnerNotificationMarkReadView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request):
        return _mark_read(request, PartnerNotification.objects.filter(partner=request.user))


class PartnerNotificationUnreadCountView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        c = PartnerNotification.objects.filter(partner=request.user, read_at__isnull=True).count()
        return Response({"unread": c}, status=200)
