from django.contrib import admin

from .models import (
    PurchaseIndent,
    PurchaseIndentApproval,
    PurchaseIndentApprovalItem,
    PurchaseIndentItem,
    PurchaseOrder,
    PurchaseOrderItem,
    Supplier,
)


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "contact_person", "email", "phone", "city", "status", "lead_time")
    search_fields = ("name", "contact_person", "email", "phone")
    list_filter = ("status", "state")


class PurchaseIndentItemInline(admin.TabularInline):
    model = PurchaseIndentItem
    extra = 0


class PurchaseIndentApprovalItemInline(admin.TabularInline):
    model = PurchaseIndentApprovalItem
    extra = 0


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0


@admin.register(PurchaseIndent)
class PurchaseIndentAdmin(admin.ModelAdmin):
    list_display = ("indent_id", "status", "created_by", "approved_by", "created_at")
    list_filter = ("status",)
    search_fields = ("indent_id",)
    readonly_fields = ("indent_id", "created_at", "updated_at", "created_by")
    date_hierarchy = "created_at"
    inlines = [PurchaseIndentItemInline]


@admin.register(PurchaseIndentApproval)
class PurchaseIndentApprovalAdmin(admin.ModelAdmin):
    list_display = ("indent_number", "status", "approved_by", "created_at")
    list_filter = ("status",)
    search_fields = ("indent_number", "approval_remarks")
    inlines = [PurchaseIndentApprovalItemInline]


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ("po_number", "vendor", "delivery_due_date", "status", "stock_in_status", "created_at")
    list_filter = ("status", "stock_in_status")
    search_fields = ("po_number", "vendor__name")
    readonly_fields = ("po_number", "stocked_in_at", "created_at", "updated_at", "created_by")
    date_hierarchy = "created_at"
    inlines = [PurchaseOrderItemInline]
