from django.contrib import admin

from .models import Client, Order, OrderLine, Product


class OrderLineInline(admin.TabularInline):
    model = OrderLine
    extra = 0
    fields = ("position", "product", "quantity")
    readonly_fields = ("position", "product", "quantity")
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "price", "stock_quantity", "created_at")
    search_fields = ("name", "description")
    readonly_fields = ("id", "created_at", "updated_at")

    fieldsets = (
        (None, {
            "fields": ("id", "name", "description")
        }),
        ("Pricing & Stock", {
            "fields": ("price", "stock_quantity")
        }),
        ("Timestamps", {
            "fields": ("created_at", "updated_at"),
            "classes": ("collapse",)
        })
    )


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ("email", "first_name", "last_name", "company", "seller", "created_at")
    list_filter = ("seller", "created_at")
    search_fields = ("email", "first_name", "last_name", "company", "seller__email")
    readonly_fields = ("id", "created_at", "updated_at")


# Orders change stock; edits go through the API so reservations stay consistent
@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "seller", "client", "state", "total", "created_at")
    list_filter = ("state", "created_at")
    search_fields = ("id", "seller__email", "client__email")
    readonly_fields = ("id", "seller", "client", "total", "state", "created_at", "updated_at")
    inlines = [OrderLineInline]

    def has_add_permission(self, request):
        return False
