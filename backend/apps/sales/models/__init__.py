from .customer import Customer
from .invoice import Invoice, InvoiceItem
from .sales_order import DispatchedItem, SalesOrder, SalesOrderItem, StockAllocation
from .sales_return import SalesReturn, SalesReturnItem

__all__ = [
    "Customer",
    "DispatchedItem",
    "Invoice",
    "InvoiceItem",
    "SalesOrder",
    "SalesOrderItem",
    "SalesReturn",
    "SalesReturnItem",
    "StockAllocation",
]
