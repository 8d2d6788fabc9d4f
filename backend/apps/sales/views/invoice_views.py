from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.audit.utils import log_audit_event
from shared.pagination import DocumentPagination
from shared.permissions import IsManager

from ..models import Invoice
from ..serializers.invoice_serializers import (
    InvoiceCreateSerializer,
    InvoiceFilterSerializer,
    InvoiceSerializer,
    InvoiceUpdateSerializer,
)
from ..services.invoice_service import InvoiceService


class InvoiceViewSet(viewsets.ModelViewSet):
    serializer_class = InvoiceSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = DocumentPagination
    results_key = "invoices"
    total_key = "totalInvoices"
    lookup_value_regex = r"\d+"
    http_method_names = ["get", "post", "put", "delete", "head", "options"]

    def _base_queryset(self):
        return (
            Invoice.objects.select_related("customer", "sales_order", "created_by")
            .prefetch_related("items__sku")
            .order_by("-created_at", "-id")
        )

    def get_queryset(self):
        qs = self._base_queryset()
        filters = InvoiceFilterSerializer(data={k: v for k, v in self.request.query_params.items() if v})
        filters.is_valid(raise_exception=True)
        params = filters.validated_data
        if "status" in params:
            qs = qs.filter(status=params["status"])
        if "customer" in params:
            qs = qs.filter(customer_id=params["customer"])
        if "sales_order" in params:
            qs = qs.filter(sales_order_id=params["sales_order"])
        return qs

    def get_permissions(self):
        if self.action == "destroy":
            return [IsAuthenticated(), IsManager()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        serializer = InvoiceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        invoice = InvoiceService.create_invoice(user=request.user, **serializer.validated_data)
        log_audit_event(
            user=request.user,
            action="INVOICE_CREATED",
            entity_type="Invoice",
            entity_id=invoice.pk,
            description=f"Invoice {invoice.invoice_number} created.",
        )
        invoice = self._base_queryset().get(pk=invoice.pk)
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        invoice = self.get_object()
        serializer = InvoiceUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        before = {"status": invoice.status, "paidAmount": invoice.paid_amount}
        invoice = InvoiceService.update_invoice(invoice, user=request.user, **serializer.validated_data)
        log_audit_event(
            user=request.user,
            action="INVOICE_UPDATED",
            entity_type="Invoice",
            entity_id=invoice.pk,
            description=f"Invoice {invoice.invoice_number} updated.",
            before=before,
            after={"status": invoice.status, "paidAmount": invoice.paid_amount},
        )
        invoice = self._base_queryset().get(pk=invoice.pk)
        return Response(InvoiceSerializer(invoice).data)

    def destroy(self, request, *args, **kwargs):
        invoice = self.get_object()
        invoice_number = invoice.invoice_number
        InvoiceService.delete_invoice(invoice)
        log_audit_event(
            user=request.user,
            action="INVOICE_DELETED",
            entity_type="Invoice",
            entity_id=kwargs.get("pk"),
            description=f"Invoice {invoice_number} deleted.",
        )
        return Response({"message": "Invoice deleted successfully"})

    @action(detail=False, methods=["get"])
    def stats(self, request):
        return Response(InvoiceService.stats())
