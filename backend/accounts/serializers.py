from rest_framework import serializers

from .models import CustomUser


# Roles a visitor may pick on the public signup form
SELF_SIGNUP_ROLES = (CustomUser.ROLE_PARTNER, CustomUser.ROLE_USER)


class SignupSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=6)
    role = serializers.ChoiceField(choices=[(r, r) for r in SELF_SIGNUP_ROLES], required=False, default=CustomUser.ROLE_PARTNER)
    phone = serializers.CharField(source='phone_number', required=False, allow_blank=True)

    class Meta:
        model = CustomUser
        fields = ['id', 'name', 'email', 'phone', 'role', 'password']
        extra_kwargs = {
            # uniqueness is reported with the portal's own message below
            'email': {'validators': []},
        }

    def validate_email(self, value):
        email = (value or "").strip().lower()
        if CustomUser.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("User already exists")
        return email

    def create(self, validated_data):
        password = validated_data.pop('password')
        return CustomUser.objects.create_user(password=password, **validated_data)


class PublicUserSerializer(serializers.ModelSerializer):
    roleDisplay = serializers.CharField(source='get_role_display', read_only=True)

    class Meta:
        model = CustomUser
        fields = [
            'id', 'email', 'name', 'role', 'roleDisplay', 'phone_number',
            'city', 'state', 'pincode', 'is_profile_complete', 'is_active', 'date_joined',
        ]
        read_only_fields = ['id', 'email', 'role', 'roleDisplay', 'is_profile_complete', 'date_joined']


class ProfileSerializer(serializers.ModelSerializer):
    """
    Self-service profile. Completion is recomputed on every write from the
    required contact fields; it is never accepted from the client.
    """
    class Meta:
        model = CustomUser
        fields = [
            'id', 'email', 'name', 'role', 'phone_number', 'city', 'state',
            'pincode', 'google_id', 'is_profile_complete',
        ]
        read_only_fields = ['id', 'role', 'google_id', 'is_profile_complete']

    def validate_email(self, value):
        email = (value or "").strip().lower()
        qs = CustomUser.objects.filter(email__iexact=email)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Email already in use")
        return email

    def update(self, instance, validated_data):
        # Accounts linked to Google keep the email Google verified
        if instance.google_id:
            validated_data.pop('email', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value.strip() if isinstance(value, str) else value)
        instance.is_profile_complete = instance.profile_is_complete()
        instance.save()
        return instance


class SupportUserSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=6)

    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'name', 'password', 'role']
        read_only_fields = ['id', 'role']
        extra_kwargs = {'email': {'validators': []}}

    def validate_email(self, value):
        email = (value or "").strip().lower()
        if CustomUser.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("User already exists")
        return email

    def create(self, validated_data):
        password = validated_data.pop('password')
        return CustomUser.objects.create_user(
            password=password, role=CustomUser.ROLE_SUPPORT, **validated_data
        )
