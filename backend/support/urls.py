from django.urls import path
from .views import SupportTicketView, QueryView

urlpatterns = [
    path('support/', SupportTicketView.as_view()),
    path('queries/', QueryView.as_view()),
]
