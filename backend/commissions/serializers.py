from rest_framework import serializers

from .models import CommissionSlab, ManagedCommission, SaleCommission


class CommissionSlabSerializer(serializers.ModelSerializer):
    partnerName = serializers.CharField(source="partner.name", read_only=True)
    partnerEmail = serializers.EmailField(source="partner.email", read_only=True)

    class Meta:
        model = CommissionSlab
        fields = ["id", "partner", "partnerName", "partnerEmail", "slabs", "updated_at"]
        read_only_fields = fields


class SaleCommissionSerializer(serializers.ModelSerializer):
    class Meta:
        model = SaleCommission
        fields = [
            "sale", "sale_date", "first_month_subscription", "amount_charged_first_month",
            "renewal_second_month", "amount_charged_second_month", "eligible_count",
            "slab", "rate", "first_month_commission", "renewal_commission", "commission",
        ]
        read_only_fields = fields


class ManagedCommissionSerializer(serializers.ModelSerializer):
    salesData = SaleCommissionSerializer(source="lines", many=True, read_only=True)

    class Meta:
        model = ManagedCommission
        fields = [
            "id", "partner", "current_slab", "total_sales", "eligible_sales",
            "first_month_sales", "renewal_sales", "total_commission", "recomputed_at", "salesData",
        ]
        read_only_fields = fields
