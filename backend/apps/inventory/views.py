from django.db.models import Q
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from shared.pagination import DocumentPagination
from shared.viewsets import AuditedModelViewSet

from .models import SKU, StockTransaction, Warehouse
from .serializers import SKUSerializer, StockTransactionSerializer, WarehouseSerializer


class SKUViewSet(AuditedModelViewSet):
    serializer_class = SKUSerializer
    entity_type = "SKU"
    results_key = "skus"
    total_key = "totalSkus"

    def get_queryset(self):
        qs = SKU.objects.all().order_by("name")
        search = self.request.query_params.get("search")
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(code__icontains=search))
        is_active = self.request.query_params.get("isActive")
        if is_active is not None:
            qs = qs.filter(is_active=is_active.lower() in {"1", "true", "yes"})
        return qs


class WarehouseViewSet(AuditedModelViewSet):
    queryset = Warehouse.objects.all()
    serializer_class = WarehouseSerializer
    entity_type = "Warehouse"
    results_key = "warehouses"
    total_key = "totalWarehouses"


class StockTransactionViewSet(viewsets.ReadOnlyModelViewSet):
    """The stock ledger, newest first. Filters: ``sku``, ``type``, ``referenceType``, ``referenceId``."""

    permission_classes = [IsAuthenticated]
    serializer_class = StockTransactionSerializer
    pagination_class = DocumentPagination
    results_key = "transactions"
    total_key = "totalTransactions"
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        qs = StockTransaction.objects.select_related("sku", "created_by")
        params = self.request.query_params
        if params.get("sku"):
            qs = qs.filter(sku_id=params["sku"])
        if params.get("type"):
            qs = qs.filter(type=params["type"])
        if params.get("referenceType"):
            qs = qs.filter(reference_type=params["referenceType"])
        if params.get("referenceId"):
            qs = qs.filter(reference_id=params["referenceId"])
        return qs
