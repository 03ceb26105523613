from django.contrib import admin

from .models import Business, BusinessSettings


class BusinessSettingsInline(admin.StackedInline):
    model = BusinessSettings
    can_delete = False
    fieldsets = (
        ('Delivery', {
            'fields': (
                'delivery_type',
                'delivery_fee_cents',
                'delivery_base_fee_cents',
                'delivery_per_km_cents',
                'distance_rounding',
                'min_order_free_delivery_cents',
            )
        }),
        ('Orders', {
            'fields': ('min_order_value_cents', 'auto_confirm_orders')
        }),
        ('Payment', {
            'fields': ('payment_method', 'payment_instructions', 'currency')
        }),
        ('Notifications', {
            'fields': ('notify_seller_new_order', 'notify_customer_status')
        }),
    )


@admin.register(Business)
class BusinessAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'owner', 'is_active', 'created_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['name', 'slug', 'contact_email']
    readonly_fields = ['id', 'created_at', 'updated_at']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [BusinessSettingsInline]
