import logging

from django.db import transaction
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import CustomUser
from accounts.permissions import IsAdminRole
from accounts.serializers import PublicUserSerializer
from commissions.services.ledger import ensure_commission_slab
from inventory.services import ensure_inventory

from .serializers import PartnerAdminUpdateSerializer
from .services import partner_stats, portal_overview

logger = logging.getLogger(__name__)


def _user_id(request, param="id"):
    raw = (request.query_params.get(param) or "").strip()
    return int(raw) if raw.isdigit() else None


class PartnerDirectoryView(APIView):
    """
    GET    /api/partners/         every user, ?role= to narrow; ?id= for one
    PUT    /api/partners/?id=     update a non-admin user
    DELETE /api/partners/?id=     delete a non-admin user
    """
    permission_classes = [IsAdminRole]

    def get(self, request):
        uid = _user_id(request)
        if uid is not None:
            user = CustomUser.objects.filter(pk=uid).first()
            if user is None:
                return Response({"message": "User not found"}, status=404)
            return Response([PublicUserSerializer(user).data], status=200)
        qs = CustomUser.objects.all().order_by("-date_joined", "-id")
        role = (request.query_params.get("role") or "").strip().lower()
        if role:
            qs = qs.filter(role=role)
        return Response(PublicUserSerializer(qs, many=True).data, status=200)

    def put(self, request):
        uid = _user_id(request)
        user = CustomUser.objects.filter(pk=uid).exclude(role=CustomUser.ROLE_ADMIN).first() if uid else None
        if user is None:
            return Response({"message": "Partner not found"}, status=404)
        ser = PartnerAdminUpdateSerializer(user, data=request.data or {}, partial=True)
        ser.is_valid(raise_exception=True)
        with transaction.atomic():
            user = ser.save()
            if user.is_partner and user.is_profile_complete:
                ensure_commission_slab(user)
                ensure_inventory(user)
        return Response(PublicUserSerializer(user).data, status=200)

    def delete(self, request):
        uid = _user_id(request)
        user = CustomUser.objects.filter(pk=uid).exclude(role=CustomUser.ROLE_ADMIN).first() if uid else None
        if user is None:
            return Response({"message": "Partner not found"}, status=404)
        user.delete()
        logger.info("User %s deleted by %s", uid, request.user.pk)
        return Response({"message": "Partner deleted successfully"}, status=200)


class PartnerStatsView(APIView):
    """
    GET /api/partners/stats/?partnerId=
    Totals plus the last 6 calendar months and the last 3 years.
    """
    permission_classes = [IsAdminRole]

    def get(self, request):
        uid = _user_id(request, "partnerId")
        if uid is None:
            return Response({"message": "Partner ID is required"}, status=400)
        partner = CustomUser.objects.filter(pk=uid).first()
        if partner is None:
            return Response({"message": "Partner not found"}, status=404)
        return Response(partner_stats(partner), status=200)


class PortalOverviewView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        return Response(portal_overview(), status=200)
