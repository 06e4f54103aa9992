from django.urls import path
from .views import LeadListView, LeadUploadView

urlpatterns = [
    path('', LeadListView.as_view()),
    path('upload/', LeadUploadView.as_view()),
]
