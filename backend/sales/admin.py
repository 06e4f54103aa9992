from django.contrib import admin
from .models import Sale


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = (
        "id", "partner", "lead", "amount", "first_month_subscription",
        "amount_charged_first_month", "renewal_second_month", "amount_charged_second_month", "date",
    )
    list_filter = ("first_month_subscription", "renewal_second_month", "date")
    search_fields = ("partner__email", "partner__name", "lead__name", "lead__mobile_no")
    raw_id_fields = ("partner", "lead")
    date_hierarchy = "date"
