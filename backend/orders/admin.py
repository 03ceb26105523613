from django.contrib import admin

from payments.money import format_money
from .models import Order, OrderDailyStats, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("dish", "dish_name", "quantity", "price_at_purchase_cents", "get_line_total")
    fields = readonly_fields
    can_delete = False

    def get_line_total(self, obj):
        return format_money(obj.order.currency, obj.line_total_cents)

    get_line_total.short_description = "Line Total"

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Orders are read-only here apart from their lifecycle fields; amounts are
    fixed at placement.
    """

    list_display = (
        "order_number",
        "business",
        "customer_name",
        "order_status",
        "payment_status",
        "delivery_type",
        "get_total_formatted",
        "created_at",
    )
    list_display_links = ("order_number",)
    search_fields = ("order_number", "customer_name", "customer_phone")
    list_filter = ("order_status", "payment_status", "delivery_type", "business", "created_at")
    inlines = [OrderItemInline]

    readonly_fields = (
        "id",
        "order_number",
        "business",
        "menu",
        "customer",
        "subtotal_cents",
        "discount_cents",
        "delivery_fee_cents",
        "total_cents",
        "coupon",
        "currency",
        "created_at",
        "updated_at",
        "fulfilled_at",
        "cancelled_at",
    )

    def get_total_formatted(self, obj):
        return format_money(obj.currency, obj.total_cents)

    get_total_formatted.short_description = "Total"
    get_total_formatted.admin_order_field = "total_cents"

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(OrderDailyStats)
class OrderDailyStatsAdmin(admin.ModelAdmin):
    list_display = ("business", "date", "order_count", "gross_cents")
    list_filter = ("business",)
    date_hierarchy = "date"
