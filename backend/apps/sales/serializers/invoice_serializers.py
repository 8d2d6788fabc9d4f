from rest_framework import serializers

from shared.serializers import DocumentSerializer, UserSummarySerializer

from ..models import Invoice, SalesOrder
from .customer_serializers import CustomerSummarySerializer
from .line_serializers import PricedLineInputSerializer, PricedLineSerializer


class InvoiceCreateSerializer(serializers.Serializer):
    salesOrder = serializers.IntegerField(source="sales_order", required=False, allow_null=True)
    customer = serializers.IntegerField()
    dueDate = serializers.DateField(source="due_date")
    items = PricedLineInputSerializer(many=True, allow_empty=False)
    paymentTerms = serializers.CharField(source="payment_terms", required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class InvoiceUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Invoice.Status.choices, required=False)
    paidAmount = serializers.DecimalField(source="paid_amount", max_digits=16, decimal_places=2, min_value=0, required=False)


class SalesOrderSummarySerializer(serializers.ModelSerializer):
    orderNumber = serializers.CharField(source="order_number", read_only=True)

    class Meta:
        model = SalesOrder
        fields = ["orderNumber"]

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {"_id": instance.pk, **data}


class InvoiceSerializer(DocumentSerializer):
    invoiceNumber = serializers.CharField(source="invoice_number", read_only=True)
    salesOrder = SalesOrderSummarySerializer(source="sales_order", read_only=True)
    customer = CustomerSummarySerializer(read_only=True)
    invoiceDate = serializers.DateTimeField(source="invoice_date", read_only=True)
    dueDate = serializers.DateField(source="due_date", read_only=True)
    items = PricedLineSerializer(many=True, read_only=True)
    totalDiscount = serializers.DecimalField(source="total_discount", max_digits=16, decimal_places=2, read_only=True)
    totalTax = serializers.DecimalField(source="total_tax", max_digits=16, decimal_places=2, read_only=True)
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=16, decimal_places=2, read_only=True)
    paidAmount = serializers.DecimalField(source="paid_amount", max_digits=16, decimal_places=2, read_only=True)
    paymentTerms = serializers.CharField(source="payment_terms", read_only=True)
    isOverdue = serializers.BooleanField(source="is_overdue", read_only=True)
    createdBy = UserSummarySerializer(source="created_by", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Invoice
        fields = [
            "invoiceNumber", "salesOrder", "customer", "invoiceDate", "dueDate", "items",
            "subtotal", "totalDiscount", "totalTax", "totalAmount", "paidAmount", "status",
            "paymentTerms", "notes", "isOverdue", "createdBy", "createdAt", "updatedAt",
        ]
        read_only_fields = fields


class InvoiceFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Invoice.Status.choices, required=False)
    customer = serializers.IntegerField(required=False)
    salesOrder = serializers.IntegerField(source="sales_order", required=False)
