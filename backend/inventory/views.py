import logging

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole, IsPartnerOrAdmin

from .models import Inventory, KitDistribution, KitRequest
from .serializers import (
    InventorySerializer,
    AddStockSerializer,
    KitDistributionSerializer,
    DistributeKitsSerializer,
    KitRequestSerializer,
    CreateKitRequestSerializer,
    KitRequestStatusSerializer,
)
from .services import (
    InventoryError,
    add_stock,
    distribute_kits,
    inventory_summary,
    request_kits,
    set_kit_request_status,
)

logger = logging.getLogger(__name__)


def _partner_scope(request, param="partnerId"):
    """
    Partners are always scoped to themselves; admins may pass ?partnerId=.
    Returns a partner id or None for "all".
    """
    user = request.user
    if not user.is_portal_admin:
        return user.id
    raw = (request.query_params.get(param) or "").strip()
    return int(raw) if raw.isdigit() else None


class InventoryView(APIView):
    """
    GET  /api/inventory/?partnerId=
    POST /api/inventory/            {partnerId, quantity, unitPrice}  (admin)
    PUT  /api/inventory/?id=        {quantity?, unit_price?, status?}  (admin)
    """
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.request.method in ("POST", "PUT"):
            return [IsAdminRole()]
        return [IsPartnerOrAdmin()]

    def get(self, request):
        qs = Inventory.objects.select_related("partner").order_by("-last_updated", "-id")
        partner_id = _partner_scope(request)
        if partner_id is not None:
            qs = qs.filter(partner_id=partner_id)
        return Response(InventorySerializer(qs, many=True).data, status=200)

    def post(self, request):
        ser = AddStockSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        inv = add_stock(data["partnerId"], data["quantity"], data["unitPrice"])
        return Response(InventorySerializer(inv).data, status=status.HTTP_201_CREATED)

    def put(self, request):
        inv_id = (request.query_params.get("id") or "").strip()
        if not inv_id.isdigit():
            return Response({"detail": "Inventory ID is required"}, status=400)
        inv = Inventory.objects.filter(pk=int(inv_id)).select_related("partner").first()
        if inv is None:
            return Response({"detail": "Inventory not found"}, status=404)
        raw_qty = (request.data or {}).get("quantity")
        if raw_qty is not None:
            try:
                if int(raw_qty) < 0:
                    return Response({"detail": "Quantity cannot be negative"}, status=400)
            except (TypeError, ValueError):
                return Response({"detail": "Quantity must be an integer"}, status=400)
        ser = InventorySerializer(inv, data=request.data or {}, partial=True)
        ser.is_valid(raise_exception=True)
        ser.save()
        return Response(ser.data, status=200)


class KitDistributionView(APIView):
    """
    POST /api/kit-distribution/  {partnerId, kitsSent, amount, date?, notes?}  (admin)
    GET  /api/kit-distribution/?partnerId=  newest first
    """
    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAdminRole()]
        return [IsPartnerOrAdmin()]

    def get(self, request):
        qs = KitDistribution.objects.select_related("partner").order_by("-distribution_date", "-id")
        partner_id = _partner_scope(request)
        if partner_id is not None:
            qs = qs.filter(partner_id=partner_id)
        return Response(KitDistributionSerializer(qs, many=True).data, status=200)

    def post(self, request):
        ser = DistributeKitsSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        result = distribute_kits(
            partner=data["partnerId"],
            quantity=data["kitsSent"],
            amount_per_kit=data["amount"],
            distribution_date=data.get("date"),
            notes=data.get("notes") or "",
        )
        return Response({
            "message": "Distribution recorded successfully",
            "distribution": KitDistributionSerializer(result["distribution"]).data,
            "inventory": InventorySerializer(result["inventory"]).data,
        }, status=200)


class KitSummaryView(APIView):
    """
    GET /api/kit-distribution/summary/?partnerId=
    """
    permission_classes = [IsPartnerOrAdmin]

    def get(self, request):
        partner_id = _partner_scope(request)
        if partner_id is None:
            return Response({"error": "Partner ID is required"}, status=400)
        partner = get_user_model().objects.filter(pk=partner_id).first()
        if partner is None:
            return Response({"error": "Partner not found"}, status=404)
        requests = KitRequest.objects.filter(partner=partner).order_by("-date", "-id")
        return Response({
            "inventory": inventory_summary(partner),
            "requests": KitRequestSerializer(requests, many=True).data,
        }, status=200)


class KitRequestView(APIView):
    """
    POST /api/kit-distribution/requests/  {quantity}           (partner)
    GET  /api/kit-distribution/requests/?partnerId=
    PUT  /api/kit-distribution/requests/  {requestId, status}  (admin)
    """
    def get_permissions(self):
        if self.request.method == "PUT":
            return [IsAdminRole()]
        return [IsPartnerOrAdmin()]

    def _all(self):
        return KitRequest.objects.select_related("partner").order_by("-date", "-id")

    def get(self, request):
        qs = self._all()
        partner_id = _partner_scope(request)
        if partner_id is not None:
            qs = qs.filter(partner_id=partner_id)
        return Response({"requests": KitRequestSerializer(qs, many=True).data}, status=200)

    def post(self, request):
        ser = CreateKitRequestSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        partner = request.user if not request.user.is_portal_admin else data.get("partnerId")
        if partner is None:
            return Response({"error": "Partner ID and quantity are required"}, status=400)
        try:
            req = request_kits(partner=partner, quantity=data["quantity"])
        except InventoryError as e:
            return Response({"error": str(e)}, status=e.status_code)
        return Response({
            "request": KitRequestSerializer(req).data,
            "inventory": inventory_summary(partner),
        }, status=201)

    def put(self, request):
        ser = KitRequestStatusSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        try:
            set_kit_request_status(data["requestId"], (data["status"] or "").strip().lower())
        except ValueError as e:
            return Response({"error": str(e)}, status=400)
        except KitRequest.DoesNotExist:
            return Response({"error": "Request not found"}, status=404)
        return Response({"requests": KitRequestSerializer(self._all(), many=True).data}, status=200)
