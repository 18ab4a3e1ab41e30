from django.contrib import admin
from django.db.models import Count, Q

from products.infrastructure.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ["name", "price_one_payment", "price_subscription", "active_licenses", "updated_at"]
    search_fields = ["name", "description"]
    readonly_fields = ["id", "created_at", "updated_at"]

    def get_queryset(self, request):
        return (
            super()
            .get_queryset(request)
            .annotate(active_license_count=Count("licenses", filter=Q(licenses__status="activa")))
        )

    @admin.display(description="Active licenses", ordering="active_license_count")
    def active_licenses(self, obj):
        return obj.active_license_count
