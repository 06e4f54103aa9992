import logging

from django.conf import settings
from django.db import transaction
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, parsers, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole, IsPartnerOrAdmin

from .models import Lead
from .serializers import LeadSerializer, PartnerLeadUpdateSerializer
from .services import LeadUploadError, import_leads, notify_lead_assigned, notify_lead_status_changed

logger = logging.getLogger(__name__)


class LeadListView(generics.ListCreateAPIView):
    """
    GET  /api/leads/            admin: all leads with assignee; partner: own leads
    GET  /api/leads/?id=<partner>  leads assigned to that partner (admin)
    POST /api/leads/            create (admin)
    PUT  /api/leads/?id=<lead>  partial update
    Filters: ?status=&platform=&city=
    """
    serializer_class = LeadSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status", "platform", "city"]

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAdminRole()]
        return [IsPartnerOrAdmin()]

    def get_queryset(self):
        user = self.request.user
        qs = Lead.objects.select_related("assigned_to").order_by("-created_at", "-id")
        if not user.is_portal_admin:
            return qs.filter(assigned_to=user)
        partner_id = (self.request.query_params.get("id") or "").strip()
        if partner_id.isdigit():
            qs = qs.filter(assigned_to_id=int(partner_id))
        return qs

    def perform_create(self, serializer):
        with transaction.atomic():
            lead = serializer.save()
            notify_lead_assigned(lead)

    def put(self, request, *args, **kwargs):
        lead_id = (request.query_params.get("id") or "").strip()
        if not lead_id.isdigit():
            return Response({"success": False, "error": "Lead id is required"}, status=400)
        user = request.user
        qs = Lead.objects.select_related("assigned_to")
        if not user.is_portal_admin:
            qs = qs.filter(assigned_to=user)
        lead = qs.filter(pk=int(lead_id)).first()
        if lead is None:
            return Response({"success": False}, status=404)

        ser_cls = LeadSerializer if user.is_portal_admin else PartnerLeadUpdateSerializer
        ser = ser_cls(lead, data=request.data or {}, partial=True)
        ser.is_valid(raise_exception=True)

        old_assignee = lead.assigned_to_id
        old_status = lead.status
        with transaction.atomic():
            lead = ser.save()
            if lead.assigned_to_id and lead.assigned_to_id != old_assignee:
                notify_lead_assigned(lead)
            if not user.is_portal_admin and lead.status != old_status:
                notify_lead_status_changed(lead, old_status, user)
        return Response(LeadSerializer(lead).data, status=200)


class LeadUploadView(APIView):
    """
    POST /api/leads/upload/  multipart "file" (.xlsx or .csv)
    Required columns: name, mobileNo, email, city, platform
    """
    permission_classes = [IsAdminRole]
    parser_classes = [parsers.MultiPartParser, parsers.FormParser]

    def post(self, request):
        f = request.FILES.get("file")
        if not f:
            return Response({"error": "No file uploaded"}, status=400)
        max_bytes = int(getattr(settings, "LEAD_UPLOAD_MAX_BYTES", 5 * 1024 * 1024))
        if f.size > max_bytes:
            return Response({"error": f"File too large (max {max_bytes} bytes)"}, status=400)
        try:
            created = import_leads(f.name, f.read())
        except LeadUploadError as e:
            return Response({"error": str(e), "details": e.errors}, status=400)
        return Response({"message": "Leads uploaded successfully", "count": len(created)}, status=status.HTTP_201_CREATED)
