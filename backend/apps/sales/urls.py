from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import CustomerViewSet, InvoiceViewSet, SalesOrderViewSet, SalesReturnViewSet

router = DefaultRouter(trailing_slash=False)
router.register(r'customers', CustomerViewSet, basename='customer')
router.register(r'sales-orders', SalesOrderViewSet, basename='sales-order')
router.register(r'invoices', InvoiceViewSet, basename='invoice')
router.register(r'sales-returns', SalesReturnViewSet, basename='sales-return')

urlpatterns = [
    path('', include(router.urls)),
]
