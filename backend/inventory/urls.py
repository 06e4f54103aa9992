from django.urls import path
from .views import InventoryView, KitDistributionView, KitSummaryView, KitRequestView

urlpatterns = [
    path('inventory/', InventoryView.as_view()),
    path('kit-distribution/', KitDistributionView.as_view()),
    path('kit-distribution/summary/', KitSummaryView.as_view()),
    path('kit-distribution/requests/', KitRequestView.as_view()),
]
