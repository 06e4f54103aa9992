from django.contrib import admin
from .models import Lead


@admin.register(Lead)
class LeadAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "mobile_no", "email", "city", "platform", "status", "assigned_to", "created_at")
    list_filter = ("status", "platform", "city")
    search_fields = ("name", "mobile_no", "email", "city")
    raw_id_fields = ("assigned_to",)
    readonly_fields = ("created_at", "updated_at")
    actions = ["mark_lost"]

    @admin.action(description="Mark selected as lost")
    def mark_lost(self, request, queryset):
        updated = queryset.exclude(status=Lead.STATUS_SUCCESSFUL).update(status=Lead.STATUS_LOST)
        self.message_user(request, f"Marked {updated} lead(s) as lost.")
