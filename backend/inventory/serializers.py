from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Inventory, KitDistribution, KitRequest


class _PartnerField(serializers.PrimaryKeyRelatedField):
    def get_queryset(self):
        return get_user_model().objects.filter(role="partner")


class InventorySerializer(serializers.ModelSerializer):
    partnerName = serializers.SerializerMethodField()
    partnerEmail = serializers.EmailField(source="partner.email", read_only=True)

    class Meta:
        model = Inventory
        fields = [
            "id", "partner", "partnerName", "partnerEmail", "quantity", "distributed",
            "unit_price", "status", "last_updated",
        ]
        read_only_fields = ["id", "partner", "partnerName", "partnerEmail", "distributed", "last_updated"]

    def get_partnerName(self, obj):
        return getattr(obj.partner, "name", "") or "Unknown Partner"


class AddStockSerializer(serializers.Serializer):
    partnerId = _PartnerField()
    quantity = serializers.IntegerField(min_value=1)
    unitPrice = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))


class KitDistributionSerializer(serializers.ModelSerializer):
    partnerName = serializers.CharField(source="partner.name", read_only=True)

    class Meta:
        model = KitDistribution
        fields = [
            "id", "partner", "partnerName", "quantity", "amount_per_kit", "total_amount",
            "distribution_date", "status", "notes",
        ]
        read_only_fields = fields


class DistributeKitsSerializer(serializers.Serializer):
    partnerId = _PartnerField()
    kitsSent = serializers.IntegerField(min_value=1)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))
    date = serializers.DateTimeField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class KitRequestSerializer(serializers.ModelSerializer):
    partnerName = serializers.CharField(source="partner.name", read_only=True)
    partnerEmail = serializers.EmailField(source="partner.email", read_only=True)

    class Meta:
        model = KitRequest
        fields = ["id", "partner", "partnerName", "partnerEmail", "quantity", "status", "date", "decided_at"]
        read_only_fields = fields


class CreateKitRequestSerializer(serializers.Serializer):
    partnerId = _PartnerField(required=False)
    quantity = serializers.IntegerField(min_value=1)


class KitRequestStatusSerializer(serializers.Serializer):
    requestId = serializers.IntegerField()
    status = serializers.CharField()
