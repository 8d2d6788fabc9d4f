from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import PurchaseIndentViewSet, PurchaseOrderViewSet, SupplierViewSet

router = DefaultRouter(trailing_slash=False)
router.register(r'suppliers', SupplierViewSet, basename='supplier')
router.register(r'purchase-indents', PurchaseIndentViewSet, basename='purchase-indent')
router.register(r'purchase-orders', PurchaseOrderViewSet, basename='purchase-order')

urlpatterns = [
    path('', include(router.urls)),
]
