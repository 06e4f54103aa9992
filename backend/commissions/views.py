import logging
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db.models import Count, Q
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole

from .models import CommissionSlab
from .serializers import CommissionSlabSerializer
from .services.calculator import CommissionConfigError, compute_breakdown, slab_key_for_sales_count
from .services.ledger import CommissionNotConfigured, load_slab_table, sale_facts_for_partner, upsert_slabs

logger = logging.getLogger(__name__)


class CommissionSlabView(APIView):
    """
    GET /api/commissions/            all slab rows (admin), ?id=<partner> for one
    PUT /api/commissions/?id=<partner>  {"slabs": {"0-30": 5, ...}}  (admin)
    A partner may only read their own row.
    """
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.request.method == "PUT":
            return [IsAdminRole()]
        return super().get_permissions()

    def get(self, request):
        raw = (request.query_params.get("id") or "").strip()
        if not request.user.is_portal_admin:
            raw = str(request.user.id)
        qs = CommissionSlab.objects.select_related("partner").order_by("partner_id")
        if raw:
            if not raw.isdigit():
                return Response({"error": "Invalid partner id"}, status=400)
            obj = qs.filter(partner_id=int(raw)).first()
            if obj is None:
                return Response({"error": "Commission slab not found"}, status=404)
            return Response(CommissionSlabSerializer(obj).data, status=200)
        return Response(CommissionSlabSerializer(qs, many=True).data, status=200)

    def put(self, request):
        raw = (request.query_params.get("id") or "").strip()
        slabs = (request.data or {}).get("slabs")
        if not raw or not slabs:
            return Response({"error": "Missing required fields: id and slabs are required"}, status=400)
        if not raw.isdigit():
            return Response({"error": "Invalid partner id"}, status=400)
        partner = get_user_model().objects.filter(pk=int(raw)).first()
        if partner is None:
            return Response({"error": "Partner not found"}, status=404)
        try:
            obj = upsert_slabs(partner, slabs)
        except CommissionConfigError as e:
            return Response({"error": str(e)}, status=400)
        logger.info("Slabs for partner %s set to %s by %s", partner.pk, obj.slabs, request.user.pk)
        return Response(CommissionSlabSerializer(obj).data, status=200)


class CommissionCalculateView(APIView):
    """
    GET /api/commissions/calculate/?partnerId=
    Preview of the partner's commission over the full sales history; nothing is written.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        raw = (request.query_params.get("partnerId") or "").strip()
        if not request.user.is_portal_admin:
            raw = str(request.user.id)
        partner = get_user_model().objects.filter(pk=int(raw)).first() if raw.isdigit() else None
        if partner is None:
            return Response({"error": "Partner not found"}, status=404)
        try:
            table = load_slab_table(partner)
            history = sale_facts_for_partner(partner)
            breakdown = compute_breakdown(table, history)
        except CommissionNotConfigured:
            return Response({"error": "Commission data not found"}, status=404)
        except CommissionConfigError as e:
            return Response({"error": str(e)}, status=400)

        facts = {f.id: f for f in history}
        slabs = []
        for slab in table.slabs:
            in_slab = [ln for ln in breakdown.lines if ln.slab == slab.key and facts[ln.sale_id].eligible]
            slabs.append({
                "range": slab.key,
                "min": slab.min,
                "max": slab.max,
                "rate": f"{slab.rate}",
                "salesCount": len(in_slab),
                "totalAmount": f"{sum((facts[ln.sale_id].amount for ln in in_slab), Decimal('0.00'))}",
                "commission": f"{sum((ln.total for ln in in_slab), Decimal('0.00'))}",
            })

        data = breakdown.as_dict()
        data.update({
            "partnerId": partner.id,
            "partnerName": partner.name,
            "slabs": slabs,
        })
        return Response(data, status=200)


class CommissionStatsView(APIView):
    """
    GET /api/commissions/stats/
    One row per partner: sales counts and the slab their total sales count falls in.
    """
    permission_classes = [IsAdminRole]

    def get(self, request):
        partners = (
            get_user_model().objects.filter(role="partner")
            .annotate(
                total_sales=Count("sales", distinct=True),
                first_month_sales=Count("sales", filter=Q(sales__first_month_subscription="yes"), distinct=True),
                renewal_sales=Count("sales", filter=Q(sales__renewal_second_month="yes"), distinct=True),
            )
            .order_by("name", "id")
        )
        rows = [
            {
                "partnerId": p.id,
                "partnerName": p.name,
                "email": p.email,
                "totalSales": p.total_sales,
                "firstMonthSales": p.first_month_sales,
                "secondMonthRenewals": p.renewal_sales,
                "currentSlab": slab_key_for_sales_count(p.total_sales),
            }
            for p in partners
        ]
        return Response(rows, status=200)
