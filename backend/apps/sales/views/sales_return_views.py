from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.audit.utils import log_audit_event
from shared.pagination import DocumentPagination
from shared.permissions import IsManager

from ..models import SalesReturn
from ..serializers.sales_return_serializers import (
    SalesReturnCreateSerializer,
    SalesReturnProcessSerializer,
    SalesReturnSerializer,
)
from ..services.sales_return_service import SalesReturnService


class SalesReturnViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = SalesReturnSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = DocumentPagination
    results_key = "returns"
    total_key = "totalReturns"
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        qs = (
            SalesReturn.objects.select_related("sales_order", "customer", "created_by", "processed_by")
            .prefetch_related("items__sku")
            .order_by("-created_at", "-id")
        )
        status_filter = self.request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        return qs

    def get_permissions(self):
        if self.action == "process":
            return [IsAuthenticated(), IsManager()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        serializer = SalesReturnCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sales_return = SalesReturnService.create_return(user=request.user, **serializer.validated_data)
        log_audit_event(
            user=request.user,
            action="SR_CREATED",
            entity_type="SalesReturn",
            entity_id=sales_return.pk,
            description=f"Sales return {sales_return.return_number} created.",
        )
        sales_return = self.get_queryset().get(pk=sales_return.pk)
        return Response(SalesReturnSerializer(sales_return).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["put"])
    def process(self, request, pk=None):
        sales_return = self.get_object()
        serializer = SalesReturnProcessSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        previous = sales_return.status
        sales_return = SalesReturnService.process_return(
            sales_return, serializer.validated_data["status"], user=request.user
        )
        log_audit_event(
            user=request.user,
            action="SR_PROCESSED",
            entity_type="SalesReturn",
            entity_id=sales_return.pk,
            description=f"Sales return {sales_return.return_number} {sales_return.status}.",
            before={"status": previous},
            after={"status": sales_return.status},
        )
        sales_return = self.get_queryset().get(pk=sales_return.pk)
        return Response(SalesReturnSerializer(sales_return).data)
