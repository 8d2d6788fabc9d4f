from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .models import Customer, DispatchedItem, Invoice, InvoiceItem, SalesOrder, SalesOrderItem, SalesReturn, SalesReturnItem

STATUS_COLORS = {
    'draft': '#d9d9d9',
    'confirmed': '#1890ff',
    'pending_dispatch': '#fa8c16',
    'dispatched': '#13c2c2',
    'delivered': '#52c41a',
    'cancelled': '#f5222d',
    'returned': '#722ed1',
    'sent': '#1890ff',
    'paid': '#52c41a',
    'partially_paid': '#faad14',
    'overdue': '#f5222d',
    'pending': '#fa8c16',
    'approved': '#52c41a',
    'processed': '#13c2c2',
    'rejected': '#f5222d',
}


def status_badge(obj):
    return format_html(
        '<span style="color: {};">{}</span>',
        STATUS_COLORS.get(obj.status, '#999'),
        obj.get_status_display(),
    )
status_badge.short_description = 'Status'


class SalesOrderItemInline(admin.TabularInline):
    model = SalesOrderItem
    extra = 0
    fields = ['sku', 'quantity', 'unit_price', 'discount', 'tax', 'total_amount']
    readonly_fields = ['total_amount']


class DispatchedItemInline(admin.TabularInline):
    model = DispatchedItem
    extra = 0
    readonly_fields = ['sku', 'quantity', 'dispatched_at']
    can_delete = False


@admin.register(SalesOrder)
class SalesOrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'customer_link', 'order_date', 'expected_delivery_date', 'formatted_total', status_badge, 'dispatch_status']
    list_filter = ['status', 'dispatch_status', 'order_date']
    search_fields = ['order_number', 'customer__name']
    date_hierarchy = 'order_date'
    readonly_fields = ['order_number', 'subtotal', 'total_discount', 'total_tax', 'total_amount', 'approved_by', 'approved_at']
    inlines = [SalesOrderItemInline, DispatchedItemInline]

    def customer_link(self, obj):
        url = reverse('admin:sales_customer_change', args=[obj.customer.pk])
        return format_html('<a href="{}">{}</a>', url, obj.customer.name)
    customer_link.short_description = 'Customer'

    def formatted_total(self, obj):
        return format_html('<strong>{}</strong>', f"{obj.total_amount:,.2f}")
    formatted_total.short_description = 'Total'


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0
    fields = ['sku', 'quantity', 'unit_price', 'discount', 'tax', 'total_amount']
    readonly_fields = ['total_amount']


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'customer', 'sales_order', 'due_date', 'total_amount', 'paid_amount', status_badge]
    list_filter = ['status', 'due_date']
    search_fields = ['invoice_number', 'customer__name', 'sales_order__order_number']
    readonly_fields = ['invoice_number', 'subtotal', 'total_discount', 'total_tax', 'total_amount', 'paid_at']
    inlines = [InvoiceItemInline]


class SalesReturnItemInline(admin.TabularInline):
    model = SalesReturnItem
    extra = 0


@admin.register(SalesReturn)
class SalesReturnAdmin(admin.ModelAdmin):
    list_display = ['return_number', 'sales_order', 'customer', 'reason', 'action_required', 'total_amount', status_badge]
    list_filter = ['status', 'reason', 'action_required']
    search_fields = ['return_number', 'sales_order__order_number', 'customer__name']
    readonly_fields = ['return_number', 'processed_by', 'processed_at']
    inlines = [SalesReturnItemInline]


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'phone', 'created_at']
    search_fields = ['name', 'email', 'phone']
