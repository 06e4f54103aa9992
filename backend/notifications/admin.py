from django.contrib import admin
from django.utils import timezone
from .models import Notification, PartnerNotification


class _ReadStateAdmin(admin.ModelAdmin):
    readonly_fields = ("timestamp", "read_at")
    actions = ["mark_read"]

    @admin.action(description="Mark selected as read")
    def mark_read(self, request, queryset):
        updated = queryset.filter(read_at__isnull=True).update(read_at=timezone.now())
        self.message_user(request, f"Marked {updated} notification(s) as read.")


@admin.register(Notification)
class NotificationAdmin(_ReadStateAdmin):
    list_display = ("id", "type", "partner", "message", "timestamp", "read_at")
    list_filter = ("type", "read_at")
    search_fields = ("partner__email", "partner__name", "message")
    raw_id_fields = ("partner", "lead", "sale", "kit_request")


@admin.register(PartnerNotification)
class PartnerNotificationAdmin(_ReadStateAdmin):
    list_display = ("id", "type", "partner", "message", "timestamp", "read_at")
    list_filter = ("type", "read_at")
    search_fields = ("partner__email", "partner__name", "message")
    raw_id_fields = ("partner", "lead", "kit_distribution", "kit_request")
