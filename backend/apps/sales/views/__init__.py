from .customer_views import CustomerViewSet
from .invoice_views import InvoiceViewSet
from .sales_order_views import SalesOrderViewSet
from .sales_return_views import SalesReturnViewSet

__all__ = ["CustomerViewSet", "InvoiceViewSet", "SalesOrderViewSet", "SalesReturnViewSet"]
