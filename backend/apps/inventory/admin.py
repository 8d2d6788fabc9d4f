from django.contrib import admin

from .models import SKU, StockTransaction, Warehouse


@admin.register(SKU)
class SKUAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "current_stock", "reserved_stock", "min_stock", "selling_price", "is_active")
    list_filter = ("is_active",)
    search_fields = ("code", "name")
    readonly_fields = ("current_stock", "reserved_stock", "created_at", "updated_at")


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "capacity", "is_active")
    list_filter = ("is_active",)
    search_fields = ("code", "name")


@admin.register(StockTransaction)
class StockTransactionAdmin(admin.ModelAdmin):
    list_display = ("created_at", "type", "sku", "quantity", "total_amount", "reference_type", "reference_id", "status")
    list_filter = ("type", "status", "reference_type")
    search_fields = ("sku__code", "sku__name", "notes")
    readonly_fields = [f.name for f in StockTransaction._meta.fields]
