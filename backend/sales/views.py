import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsPartnerOrAdmin
from commissions.services.calculator import CommissionConfigError
from commissions.services.ledger import CommissionNotConfigured, recompute_partner_commission
from commissions.serializers import ManagedCommissionSerializer
from inventory.services import InventoryError

from .models import Sale
from .serializers import SaleSerializer, RecordSaleSerializer, SubscriptionUpdateSerializer
from .services import SaleError, record_sale, update_subscription

logger = logging.getLogger(__name__)


class SalesView(APIView):
    """
    GET    /api/sales/?partnerId=    newest first
    POST   /api/sales/               {leadId, amount, partnerId, address?, state?, pincode?}
    PUT    /api/sales/?id=<leadId>   subscription update + commission recompute
    DELETE /api/sales/?id=<saleId>
    """
    permission_classes = [IsPartnerOrAdmin]

    def get(self, request):
        raw = (request.query_params.get("partnerId") or "").strip()
        if not raw and not request.user.is_portal_admin:
            raw = str(request.user.id)
        if not raw.isdigit():
            return Response({"error": "Partner ID is required"}, status=400)
        partner_id = int(raw)
        if not request.user.is_portal_admin and partner_id != request.user.id:
            return Response({"error": "Not authorized for this partner"}, status=403)
        qs = (
            Sale.objects.filter(partner_id=partner_id)
            .select_related("lead", "commission_line")
            .order_by("-date", "-id")
        )
        return Response(SaleSerializer(qs, many=True).data, status=200)

    def post(self, request):
        ser = RecordSaleSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        partner = request.user
        if request.user.is_portal_admin:
            partner = get_user_model().objects.filter(pk=data.get("partnerId"), role="partner").first()
            if partner is None:
                return Response({"error": "Partner not found"}, status=404)
        elif data.get("partnerId") not in (None, request.user.id):
            return Response({"error": "Not authorized for this partner"}, status=403)

        try:
            sale = record_sale(
                partner=partner,
                lead_id=data["leadId"],
                amount=data["amount"],
                address=data.get("address"),
                state=data.get("state"),
                pincode=data.get("pincode"),
            )
        except (InventoryError, SaleError) as e:
            return Response({"error": str(e)}, status=e.status_code)
        return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)

    def put(self, request):
        lead_id = (request.query_params.get("id") or "").strip()
        if not lead_id.isdigit():
            return Response({"error": "Sale ID is required"}, status=400)
        ser = SubscriptionUpdateSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        with transaction.atomic():
            sale = (
                Sale.objects.select_for_update()
                .filter(lead_id=int(lead_id), partner=request.user)
                .order_by("-date", "-id")
                .first()
            )
            if sale is None:
                return Response({"error": "Sale not found or unauthorized"}, status=404)
            update_subscription(
                sale=sale,
                first_month=data["firstMonthSubscription"],
                amount_first_month=data.get("amountChargedFirstMonth"),
                renewal=data["renewalSecondMonth"],
                amount_second_month=data.get("amountChargedSecondMonth"),
            )

        try:
            managed, _ = recompute_partner_commission(request.user)
        except (CommissionNotConfigured, CommissionConfigError) as e:
            logger.warning("Commission update failed for partner %s: %s", request.user.pk, e)
            return Response({"error": "Error updating commission", "details": str(e)}, status=500)

        sale.refresh_from_db()
        return Response({
            "sale": SaleSerializer(sale).data,
            "commission": ManagedCommissionSerializer(managed).data,
        }, status=200)

    def delete(self, request):
        sale_id = (request.query_params.get("id") or "").strip()
        if not sale_id.isdigit():
            return Response({"error": "Sale ID is required"}, status=400)
        deleted, _ = Sale.objects.filter(pk=int(sale_id), partner=request.user).delete()
        if not deleted:
            return Response({"error": "Sale not found or unauthorized"}, status=404)
        try:
            recompute_partner_commission(request.user)
        except CommissionNotConfigured:
            logger.info("Sale %s deleted; partner %s has no slabs to recompute", sale_id, request.user.pk)
        return Response({"message": "Sale deleted successfully"}, status=200)
