from rest_framework import serializers

from .models import SupportTicket, Query


class _UserRefSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.EmailField()


class SupportTicketSerializer(serializers.ModelSerializer):
    partner = _UserRefSerializer(read_only=True)

    class Meta:
        model = SupportTicket
        fields = ["id", "partner", "subject", "message", "status", "reply", "created_at", "updated_at"]
        read_only_fields = ["id", "partner", "status", "reply", "created_at", "updated_at"]


class TicketReplySerializer(serializers.Serializer):
    reply = serializers.CharField(allow_blank=False, trim_whitespace=True)


class QuerySerializer(serializers.ModelSerializer):
    created_by = _UserRefSerializer(read_only=True)
    resolved_by = _UserRefSerializer(read_only=True)

    class Meta:
        model = Query
        fields = ["id", "query", "reply", "status", "created_by", "resolved_by", "created_at", "updated_at"]
        read_only_fields = ["id", "reply", "status", "created_by", "resolved_by", "created_at", "updated_at"]


class QueryReplySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    reply = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=Query.STATUS_CHOICES, required=False)
