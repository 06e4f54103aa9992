from django.urls import path
from .views import (
    SignupView,
    CustomTokenObtainPairView,
    ProfileView,
    SupportUserCreateView,
    LogoutView,
)
from .token_serializers import CustomTokenRefreshView

urlpatterns = [
    path('signup/', SignupView.as_view(), name='signup'),
    path('login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('logout/', LogoutView.as_view(), name='logout'),
    path('profile/', ProfileView.as_view(), name='profile'),
    path('support-users/', SupportUserCreateView.as_view(), name='support_users'),
]
