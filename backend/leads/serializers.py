from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Lead

_PLATFORMS = {p.lower(): p for p, _ in Lead.PLATFORM_CHOICES}


def _normalize_platform(value):
    return _PLATFORMS.get(str(value or "").strip().lower(), value)


class _AssigneeSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.EmailField()
    phone_number = serializers.CharField()


class LeadSerializer(serializers.ModelSerializer):
    assigned_to = serializers.PrimaryKeyRelatedField(
        queryset=get_user_model().objects.filter(role="partner"), required=False, allow_null=True
    )
    assignee = _AssigneeSerializer(source="assigned_to", read_only=True)

    class Meta:
        model = Lead
        fields = [
            "id", "name", "mobile_no", "email", "city", "platform", "status",
            "assigned_to", "assignee", "address", "state", "pincode", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "assignee", "created_at", "updated_at"]

    def to_internal_value(self, data):
        if "platform" in data:
            data = data.copy() if hasattr(data, "copy") else dict(data)
            data["platform"] = _normalize_platform(data["platform"])
        return super().to_internal_value(data)

    def validate_mobile_no(self, value):
        digits = "".join(ch for ch in value if ch.isdigit())
        if len(digits) < 10:
            raise serializers.ValidationError("Enter a valid mobile number")
        return value.strip()


class PartnerLeadUpdateSerializer(LeadSerializer):
    """
    What a partner may change on a lead assigned to them.
    """
    assigned_to = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta(LeadSerializer.Meta):
        read_only_fields = [
            "id", "name", "mobile_no", "email", "city", "platform", "assigned_to",
            "assignee", "created_at", "updated_at",
        ]


class LeadUploadRowSerializer(LeadSerializer):
    """
    One spreadsheet row. Same checks as the create endpoint, no assignee.
    """
    class Meta:
        model = Lead
        fields = ["name", "mobile_no", "email", "city", "platform"]
