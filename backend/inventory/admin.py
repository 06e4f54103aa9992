from django.contrib import admin
from .models import Inventory, KitDistribution, KitRequest


@admin.register(Inventory)
class InventoryAdmin(admin.ModelAdmin):
    list_display = ("id", "partner", "quantity", "distributed", "unit_price", "status", "last_updated")
    list_filter = ("status",)
    search_fields = ("partner__email", "partner__name")
    raw_id_fields = ("partner",)
    readonly_fields = ("last_updated", "created_at")


@admin.register(KitDistribution)
class KitDistributionAdmin(admin.ModelAdmin):
    list_display = ("id", "partner", "quantity", "amount_per_kit", "total_amount", "status", "distribution_date")
    list_filter = ("status", "distribution_date")
    search_fields = ("partner__email", "partner__name", "notes")
    raw_id_fields = ("partner",)
    readonly_fields = ("total_amount",)


@admin.register(KitRequest)
class KitRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "partner", "quantity", "status", "date", "decided_at")
    list_filter = ("status",)
    search_fields = ("partner__email", "partner__name")
    raw_id_fields = ("partner",)
