from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import SKUViewSet, StockTransactionViewSet, WarehouseViewSet

router = DefaultRouter(trailing_slash=False)
router.register(r'skus', SKUViewSet, basename='sku')
router.register(r'warehouses', WarehouseViewSet, basename='warehouse')
router.register(r'stock-transactions', StockTransactionViewSet, basename='stock-transaction')

urlpatterns = [
    path('', include(router.urls)),
]
