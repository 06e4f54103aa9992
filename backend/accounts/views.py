import logging

from django.db import transaction
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings as jwt_settings
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from commissions.services.ledger import ensure_commission_slab
from inventory.services import ensure_inventory

from .models import CustomUser
from .permissions import IsAdminRole
from .serializers import SignupSerializer, ProfileSerializer, SupportUserSerializer
from .token_serializers import CustomTokenObtainPairSerializer

logger = logging.getLogger(__name__)


class SignupView(generics.CreateAPIView):
    queryset = CustomUser.objects.all()
    permission_classes = [AllowAny]
    authentication_classes = []
    serializer_class = SignupSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Signup: user %s registered as %s", user.pk, user.role)
        return Response(
            {"message": "User created successfully", "user": {"id": user.id, "email": user.email, "role": user.role}},
            status=status.HTTP_201_CREATED,
        )


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class ProfileView(generics.RetrieveUpdateAPIView):
    """
    GET/PUT /api/accounts/profile/
    Completing the profile provisions a partner's commission slab row and
    an empty inventory row so admins can allot rates and kits right away.
    """
    permission_classes = [IsAuthenticated]
    serializer_class = ProfileSerializer
    http_method_names = ['get', 'put', 'patch', 'head', 'options']

    def get_object(self):
        return self.request.user

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        user = self.get_object()
        serializer = self.get_serializer(user, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            user = serializer.save()
            if user.is_profile_complete and user.is_partner:
                ensure_commission_slab(user)
                ensure_inventory(user)
        return Response(
            {"message": "Profile updated successfully", "user": self.get_serializer(user).data},
            status=status.HTTP_200_OK,
        )


class SupportUserCreateView(generics.CreateAPIView):
    """
    POST /api/accounts/support-users/
    Admin-only creation of support desk accounts.
    """
    queryset = CustomUser.objects.all()
    permission_classes = [IsAdminRole]
    serializer_class = SupportUserSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Support user %s created by %s", user.pk, request.user.pk)
        return Response(
            {"message": "Support user created successfully", "user": serializer.data},
            status=status.HTTP_201_CREATED,
        )


class LogoutView(generics.GenericAPIView):
    """
    POST /api/accounts/logout/  {refresh}
    Blacklists the caller's refresh token so it can no longer mint access tokens.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        raw = (request.data or {}).get("refresh")
        if not raw:
            return Response({"detail": "Refresh token is required"}, status=status.HTTP_400_BAD_REQUEST)
        try:
            token = RefreshToken(raw)
        except TokenError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        if str(token.get(jwt_settings.USER_ID_CLAIM)) != str(request.user.pk):
            return Response({"detail": "Token does not belong to this user"}, status=status.HTTP_403_FORBIDDEN)
        token.blacklist()
        logger.info("User %s logged out", request.user.pk)
        return Response({"message": "Logged out successfully"}, status=status.HTTP_200_OK)
