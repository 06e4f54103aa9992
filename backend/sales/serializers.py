from decimal import Decimal

from rest_framework import serializers

from .models import Sale


class _LeadRefSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.EmailField()


class SaleSerializer(serializers.ModelSerializer):
    lead = _LeadRefSerializer(read_only=True)
    commission = serializers.DecimalField(
        source="commission_line.commission", max_digits=12, decimal_places=2, read_only=True
    )

    class Meta:
        model = Sale
        fields = [
            "id", "lead", "partner", "quantity", "amount",
            "first_month_subscription", "amount_charged_first_month",
            "renewal_second_month", "amount_charged_second_month",
            "date", "commission",
        ]
        read_only_fields = fields


class RecordSaleSerializer(serializers.Serializer):
    leadId = serializers.IntegerField()
    partnerId = serializers.IntegerField(required=False)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    state = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    pincode = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=10)


class SubscriptionUpdateSerializer(serializers.Serializer):
    firstMonthSubscription = serializers.ChoiceField(choices=Sale.YES_NO)
    amountChargedFirstMonth = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )
    renewalSecondMonth = serializers.ChoiceField(choices=Sale.YES_NO)
    amountChargedSecondMonth = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )

    def to_internal_value(self, data):
        # Blank amount inputs from the form mean "not charged"
        if hasattr(data, "copy"):
            data = data.copy()
        for key in ("amountChargedFirstMonth", "amountChargedSecondMonth"):
            if key in data and data[key] in ("", 0, "0"):
                data[key] = None
        for key in ("firstMonthSubscription", "renewalSecondMonth"):
            if isinstance(data.get(key), str):
                data[key] = data[key].strip().lower()
        return super().to_internal_value(data)
