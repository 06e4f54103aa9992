from django.urls import path
from .views import (
    AdminFeedListView,
    AdminFeedMarkReadView,
    AdminFeedUnreadCountView,
    PartnerNotificationListView,
    PartnerNotificationMarkReadView,
    PartnerNotificationUnreadCountView,
)

urlpatterns = [
    path("notifications/", AdminFeedListView.as_view()),
    path("notifications/mark-read/", AdminFeedMarkReadView.as_view()),
    path("notifications/unread-count/", AdminFeedUnreadCountView.as_view()),
    path("partner-notifications/", PartnerNotificationListView.as_view()),
    path("partner-notifications/mark-read/", PartnerNotificationMarkReadView.as_view()),
    path("partner-notifications/unread-count/", PartnerNotificationUnreadCountView.as_view()),
]
