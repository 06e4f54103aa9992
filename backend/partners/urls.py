from django.urls import path
from .views import PartnerDirectoryView, PartnerStatsView, PortalOverviewView

urlpatterns = [
    path('', PartnerDirectoryView.as_view()),
    path('stats/', PartnerStatsView.as_view()),
    path('overview/', PortalOverviewView.as_view()),
]
