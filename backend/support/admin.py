from django.contrib import admin
from .models import SupportTicket, Query


@admin.register(SupportTicket)
class SupportTicketAdmin(admin.ModelAdmin):
    list_display = ("id", "partner", "subject", "status", "created_at", "updated_at")
    list_filter = ("status", "created_at")
    search_fields = ("subject", "message", "partner__email", "partner__name")
    raw_id_fields = ("partner", "replied_by")
    readonly_fields = ("created_at", "updated_at")


@admin.register(Query)
class QueryAdmin(admin.ModelAdmin):
    list_display = ("id", "created_by", "status", "resolved_by", "created_at")
    list_filter = ("status",)
    search_fields = ("query", "reply", "created_by__email")
    raw_id_fields = ("created_by", "resolved_by")
    readonly_fields = ("created_at", "updated_at")
