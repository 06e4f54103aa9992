from django.contrib import admin
admin.site.site_header = "Trading Kulture Administration"
admin.site.site_title = "Trading Kulture Admin"
admin.site.index_title = "Partner portal"
from django.urls import path, include
from core.views import HealthzView, PortalInfoView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('healthz', HealthzView.as_view()),
    path('api/portal/', PortalInfoView.as_view()),
    path('api/accounts/', include('accounts.urls')),
    path('api/partners/', include('partners.urls')),
    path('api/leads/', include('leads.urls')),
    path('api/', include('inventory.urls')),
    path('api/sales/', include('sales.urls')),
    path('api/commissions/', include('commissions.urls')),
    path('api/', include('notifications.urls')),
    path('api/', include('support.urls')),
]
