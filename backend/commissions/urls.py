from django.urls import path
from .views import CommissionSlabView, CommissionCalculateView, CommissionStatsView

urlpatterns = [
    path('', CommissionSlabView.as_view()),
    path('calculate/', CommissionCalculateView.as_view()),
    path('stats/', CommissionStatsView.as_view()),
]
