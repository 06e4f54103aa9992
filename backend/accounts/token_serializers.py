from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework import serializers
from django.contrib.auth import get_user_model
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.views import TokenRefreshView


def _apply_claims(token, user):
    token['role'] = user.role
    token['email'] = user.email
    token['name'] = user.name or ''
    token['is_profile_complete'] = bool(user.is_profile_complete)
    token['is_staff'] = bool(user.is_staff)
    token['is_superuser'] = bool(user.is_superuser)
    return token


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        initial = getattr(self, "initial_data", {}) or {}
        email = (initial.get("email") or attrs.get("email") or "").strip().lower()
        if not email:
            raise serializers.ValidationError({"detail": "Email is required."})
        attrs["email"] = email

        data = super().validate(attrs)

        # Optional: if the client provides a role, ensure it matches the user's role
        provided_role = str(initial.get("role") or "").strip().lower()
        if provided_role and provided_role != (self.user.role or "").lower():
            raise serializers.ValidationError({"detail": "Role mismatch: not authorized for this role."})

        data["user"] = {
            "id": self.user.id,
            "email": self.user.email,
            "name": self.user.name,
            "role": self.user.role,
            "is_profile_complete": self.user.is_profile_complete,
        }
        return data

    @classmethod
    def get_token(cls, user):
        return _apply_claims(super().get_token(user), user)


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """
    Refreshed access tokens carry the same role claims as login tokens, so a
    role change (or a freshly completed profile) shows up on the next refresh.
    """
    def validate(self, attrs):
        UserModel = get_user_model()
        try:
            data = super().validate(attrs)
        except UserModel.DoesNotExist:
            raise serializers.ValidationError({"detail": "User for this token no longer exists."})

        refresh = RefreshToken(attrs.get("refresh"))
        user_id = refresh.get(api_settings.USER_ID_CLAIM, None)
        user = UserModel.objects.filter(**{api_settings.USER_ID_FIELD: user_id}).first() if user_id is not None else None
        if user is not None:
            data["access"] = str(_apply_claims(refresh.access_token, user))
        return data


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer
