from django.contrib import admin, messages

from .models import Dish, Menu
from .services import MenuPublishingService


@admin.register(Menu)
class MenuAdmin(admin.ModelAdmin):
    list_display = ['title', 'business', 'status', 'version', 'start_date', 'end_date', 'updated_at']
    list_filter = ['status', 'business']
    search_fields = ['title', 'business__name']
    readonly_fields = ['id', 'version', 'created_at', 'updated_at']
    actions = ['publish_selected']

    @admin.action(description="Publish selected menu")
    def publish_selected(self, request, queryset):
        if queryset.count() != 1:
            self.message_user(request, "Select exactly one menu to publish.", level=messages.ERROR)
            return
        menu = MenuPublishingService.publish(queryset.get())
        self.message_user(request, f"Published {menu.title}.")


@admin.register(Dish)
class DishAdmin(admin.ModelAdmin):
    list_display = ['name', 'business', 'category', 'price_cents', 'is_available']
    list_filter = ['is_available', 'business', 'category']
    list_editable = ['is_available']
    search_fields = ['name', 'business__name']
    readonly_fields = ['id', 'created_at', 'updated_at']
