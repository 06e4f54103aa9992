from rest_framework import serializers

from accounts.models import CustomUser
from accounts.serializers import PublicUserSerializer


class PartnerAdminUpdateSerializer(PublicUserSerializer):
    role = serializers.ChoiceField(
        choices=[r for r in CustomUser.ROLE_CHOICES if r[0] != CustomUser.ROLE_ADMIN], required=False
    )

    class Meta(PublicUserSerializer.Meta):
        read_only_fields = ['id', 'email', 'roleDisplay', 'is_profile_complete', 'date_joined']

    def update(self, instance, validated_data):
        for attr, value in validated_data.items():
            setattr(instance, attr, value.strip() if isinstance(value, str) else value)
        instance.is_profile_complete = instance.profile_is_complete()
        instance.save()
        return instance
