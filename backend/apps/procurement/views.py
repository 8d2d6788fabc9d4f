from __future__ import annotations

from django.db.models import Q
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.audit.utils import log_audit_event
from shared.viewsets import AuditedModelViewSet

from .models import PurchaseIndent, PurchaseIndentApproval, PurchaseOrder, Supplier
from .serializers import (
    ApprovedVendorItemSerializer,
    IndentApproveSerializer,
    PurchaseIndentApprovalSerializer,
    PurchaseIndentSerializer,
    PurchaseIndentWriteSerializer,
    PurchaseOrderCreateSerializer,
    PurchaseOrderFilterSerializer,
    PurchaseOrderSerializer,
    SupplierSerializer,
)
from .services import ProcurementService


class SupplierViewSet(AuditedModelViewSet):
    serializer_class = SupplierSerializer
    entity_type = "Supplier"
    results_key = "suppliers"
    total_key = "totalSuppliers"

    def get_queryset(self):
        qs = Supplier.objects.all().order_by("name")
        params = self.request.query_params
        if params.get("status"):
            qs = qs.filter(status=params["status"])
        search = params.get("search")
        if search:
            qs = qs.filter(
                Q(name__icontains=search) | Q(contact_person__icontains=search) | Q(email__icontains=search)
            )
        return qs


class PurchaseIndentViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Indents are listed as a plain array, newest first."""

    serializer_class = PurchaseIndentSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        qs = (
            PurchaseIndent.objects.select_related("created_by", "approved_by")
            .prefetch_related("items__sku", "items__vendor")
            .order_by("-created_at", "-id")
        )
        status_filter = self.request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        return qs

    def _respond(self, indent, status_code=status.HTTP_200_OK):
        indent = self.get_queryset().get(pk=indent.pk)
        return Response(PurchaseIndentSerializer(indent).data, status=status_code)

    def create(self, request, *args, **kwargs):
        serializer = PurchaseIndentWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        indent = ProcurementService.create_indent(user=request.user, **serializer.validated_data)
        log_audit_event(
            user=request.user,
            action="INDENT_CREATED",
            entity_type="PurchaseIndent",
            entity_id=indent.pk,
            description=f"Indent {indent.indent_id} created.",
        )
        return self._respond(indent, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        indent = self.get_object()
        serializer = PurchaseIndentWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        indent = ProcurementService.update_indent(indent, user=request.user, **serializer.validated_data)
        log_audit_event(
            user=request.user,
            action="INDENT_UPDATED",
            entity_type="PurchaseIndent",
            entity_id=indent.pk,
            description=f"Indent {indent.indent_id} items replaced.",
        )
        return self._respond(indent)

    def destroy(self, request, *args, **kwargs):
        indent = self.get_object()
        previous = indent.status
        indent = ProcurementService.delete_indent(indent)
        log_audit_event(
            user=request.user,
            action="INDENT_DELETED",
            entity_type="PurchaseIndent",
            entity_id=indent.pk,
            before={"status": previous},
            after={"status": indent.status},
        )
        return Response({"message": "Indent deleted"})

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        indent = self.get_object()
        serializer = IndentApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        indent, approval = ProcurementService.approve_indent(indent, user=request.user, **serializer.validated_data)
        log_audit_event(
            user=request.user,
            action="INDENT_APPROVED",
            entity_type="PurchaseIndent",
            entity_id=indent.pk,
            description=f"Indent {indent.indent_id} approved.",
            after={"status": indent.status, "approval": approval.pk},
        )
        indent = self.get_queryset().get(pk=indent.pk)
        approval = _approvals().get(pk=approval.pk)
        return Response({
            "message": "Indent approved and approval record created.",
            "approvedIndent": PurchaseIndentSerializer(indent).data,
            "approvalRecord": PurchaseIndentApprovalSerializer(approval).data,
        })

    @action(detail=False, methods=["get"], url_path="pending-for-approval")
    def pending_for_approval(self, request):
        indents = self.get_queryset().filter(status=PurchaseIndent.Status.PENDING)
        return Response(PurchaseIndentSerializer(indents, many=True).data)

    @action(detail=False, methods=["get"], url_path="approved-indents")
    def approved_indents(self, request):
        return Response(PurchaseIndentApprovalSerializer(_approvals(), many=True).data)


def _approvals():
    return (
        PurchaseIndentApproval.objects.select_related("indent", "approved_by")
        .prefetch_related("items__sku", "items__vendor")
        .order_by("-created_at", "-id")
    )


class PurchaseOrderViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = PurchaseOrderSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        qs = (
            PurchaseOrder.objects.select_related("vendor", "created_by")
            .prefetch_related("items__sku", "indent_approvals")
            .order_by("-created_at", "-id")
        )
        filters = PurchaseOrderFilterSerializer(data={k: v for k, v in self.request.query_params.items() if v})
        filters.is_valid(raise_exception=True)
        params = filters.validated_data
        if "vendor" in params:
            qs = qs.filter(vendor_id=params["vendor"])
        if "stock_in_status" in params:
            qs = qs.filter(stock_in_status=params["stock_in_status"])
        return qs

    def _serialize(self, purchase_order):
        return PurchaseOrderSerializer(self.get_queryset().get(pk=purchase_order.pk)).data

    def create(self, request, *args, **kwargs):
        serializer = PurchaseOrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        purchase_order = ProcurementService.create_purchase_order(user=request.user, **serializer.validated_data)
        log_audit_event(
            user=request.user,
            action="PO_CREATED",
            entity_type="PurchaseOrder",
            entity_id=purchase_order.pk,
            description=f"PO {purchase_order.po_number} created.",
        )
        return Response(
            {"message": "Purchase Order created successfully", "purchaseOrder": self._serialize(purchase_order)},
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["get"], url_path=r"approved-items-by-vendor/(?P<vendor_id>\d+)")
    def approved_items_by_vendor(self, request, vendor_id=None):
        rows = ProcurementService.approved_items_by_vendor(int(vendor_id))
        return Response(ApprovedVendorItemSerializer(rows, many=True).data)

    @action(detail=True, methods=["put"], url_path="stock-in")
    def stock_in(self, request, pk=None):
        purchase_order = ProcurementService.stock_in(self.get_object(), user=request.user)
        log_audit_event(
            user=request.user,
            action="PO_STOCKED_IN",
            entity_type="PurchaseOrder",
            entity_id=purchase_order.pk,
            description=f"PO {purchase_order.po_number} stocked in.",
            after={"stockInStatus": purchase_order.stock_in_status},
        )
        return Response({
            "message": "Purchase Order marked as Stocked In.",
            "purchaseOrder": self._serialize(purchase_order),
        })
