from rest_framework import serializers
from .models import Notification, PartnerNotification


class _PartnerRefSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.EmailField()


class NotificationSerializer(serializers.ModelSerializer):
    is_read = serializers.BooleanField(read_only=True)
    partner = _PartnerRefSerializer(read_only=True)

    class Meta:
        model = Notification
        fields = [
            "id",
            "type",
            "message",
            "partner",
            "lead",
            "sale",
            "kit_request",
            "timestamp",
            "read_at",
            "is_read",
        ]
        read_only_fields = fields


class PartnerNotificationSerializer(serializers.ModelSerializer):
    is_read = serializers.BooleanField(read_only=True)

    class Meta:
        model = PartnerNotification
        fields = [
            "id",
            "type",
            "message",
            "partner",
            "lead",
            "kit_distribution",
            "kit_request",
            "timestamp",
            "read_at",
            "is_read",
        ]
        read_only_fields = fields
