from django.contrib import admin
from .models import CommissionSlab, ManagedCommission, SaleCommission
from .services.ledger import recompute_partner_commission, CommissionNotConfigured


@admin.register(CommissionSlab)
class CommissionSlabAdmin(admin.ModelAdmin):
    list_display = ("partner", "slabs", "updated_at")
    search_fields = ("partner__email", "partner__name")
    raw_id_fields = ("partner",)


class SaleCommissionInline(admin.TabularInline):
    model = SaleCommission
    extra = 0
    can_delete = False
    raw_id_fields = ("sale",)
    readonly_fields = (
        "sale", "sale_date", "eligible_count", "slab", "rate",
        "first_month_commission", "renewal_commission", "commission",
    )
    fields = readonly_fields


@admin.register(ManagedCommission)
class ManagedCommissionAdmin(admin.ModelAdmin):
    list_display = ("partner", "current_slab", "total_sales", "eligible_sales", "total_commission", "recomputed_at")
    list_filter = ("current_slab",)
    search_fields = ("partner__email", "partner__name")
    raw_id_fields = ("partner",)
    readonly_fields = ("recomputed_at", "created_at")
    inlines = [SaleCommissionInline]
    actions = ["recompute_selected"]

    @admin.action(description="Recompute commission from sales history")
    def recompute_selected(self, request, queryset):
        done = 0
        for mc in queryset.select_related("partner"):
            try:
                recompute_partner_commission(mc.partner)
                done += 1
            except CommissionNotConfigured:
                continue
        self.message_user(request, f"Recomputed {done} partner(s).")
