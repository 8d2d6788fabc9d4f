from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.audit.utils import log_audit_event
from shared.pagination import DocumentPagination
from shared.permissions import IsManager

from ..models import SalesOrder
from ..serializers.sales_order_serializers import (
    DispatchSerializer,
    SalesOrderCreateSerializer,
    SalesOrderFilterSerializer,
    SalesOrderSerializer,
    SalesOrderStatusSerializer,
    SalesOrderUpdateSerializer,
)
from ..services.dispatch_service import DispatchService
from ..services.sales_order_service import SalesOrderService


class SalesOrderViewSet(viewsets.ModelViewSet):
    serializer_class = SalesOrderSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = DocumentPagination
    results_key = "salesOrders"
    total_key = "totalOrders"
    lookup_value_regex = r"\d+"
    http_method_names = ["get", "post", "put", "delete", "head", "options"]

    def _base_queryset(self):
        return (
            SalesOrder.objects.select_related("customer", "created_by", "approved_by")
            .prefetch_related("items__sku", "dispatched_items__sku", "allocated_stock")
            .order_by("-created_at", "-id")
        )

    def get_queryset(self):
        qs = self._base_queryset()
        filters = SalesOrderFilterSerializer(data={k: v for k, v in self.request.query_params.items() if v})
        filters.is_valid(raise_exception=True)
        params = filters.validated_data
        if "status" in params:
            qs = qs.filter(status=params["status"])
        if "customer" in params:
            qs = qs.filter(customer_id=params["customer"])
        if "start_date" in params:
            qs = qs.filter(order_date__date__gte=params["start_date"])
        if "end_date" in params:
            qs = qs.filter(order_date__date__lte=params["end_date"])
        return qs

    def get_permissions(self):
        if self.action == "destroy":
            return [IsAuthenticated(), IsManager()]
        return super().get_permissions()

    def _respond(self, order, status_code=status.HTTP_200_OK):
        order = self._base_queryset().get(pk=order.pk)
        return Response(SalesOrderSerializer(order).data, status=status_code)

    def create(self, request, *args, **kwargs):
        serializer = SalesOrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = SalesOrderService.create_order(user=request.user, **serializer.validated_data)
        log_audit_event(
            user=request.user,
            action="SO_CREATED",
            entity_type="SalesOrder",
            entity_id=order.pk,
            description=f"Sales order {order.order_number} created.",
        )
        return self._respond(order, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        order = self.get_object()
        serializer = SalesOrderUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        before = {"status": order.status, "totalAmount": order.total_amount}
        order = SalesOrderService.update_order(order, changes=serializer.validated_data, user=request.user)
        log_audit_event(
            user=request.user,
            action="SO_UPDATED",
            entity_type="SalesOrder",
            entity_id=order.pk,
            description=f"Sales order {order.order_number} updated.",
            before=before,
            after={"status": order.status, "totalAmount": order.total_amount},
        )
        return self._respond(order)

    def destroy(self, request, *args, **kwargs):
        order = self.get_object()
        order_number = order.order_number
        SalesOrderService.delete_order(order)
        log_audit_event(
            user=request.user,
            action="SO_DELETED",
            entity_type="SalesOrder",
            entity_id=kwargs.get("pk"),
            description=f"Sales order {order_number} deleted.",
        )
        return Response({"message": "Sales order deleted successfully"})

    @action(detail=False, methods=["get"])
    def stats(self, request):
        return Response(SalesOrderService.stats())

    @action(detail=True, methods=["put"], url_path="status")
    def change_status(self, request, pk=None):
        order = self.get_object()
        serializer = SalesOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        previous = order.status
        order = SalesOrderService.change_status(order, serializer.validated_data["status"], user=request.user)
        log_audit_event(
            user=request.user,
            action="SO_STATUS_CHANGED",
            entity_type="SalesOrder",
            entity_id=order.pk,
            description=f"Sales order {order.order_number} moved from {previous} to {order.status}.",
            before={"status": previous},
            after={"status": order.status},
        )
        return self._respond(order)

    @action(detail=True, methods=["put"], url_path="dispatch")
    def dispatch_order(self, request, pk=None):
        order = self.get_object()
        serializer = DispatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = DispatchService.dispatch(order, serializer.validated_data["dispatched_items"], user=request.user)
        log_audit_event(
            user=request.user,
            action="SO_DISPATCHED",
            entity_type="SalesOrder",
            entity_id=order.pk,
            description=f"Sales order {order.order_number} dispatched.",
            after={"dispatchedItems": request.data.get("dispatchedItems")},
        )
        order = self._base_queryset().get(pk=order.pk)
        return Response({"message": "Order dispatched successfully", "order": SalesOrderSerializer(order).data})
