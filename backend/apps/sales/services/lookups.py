from shared.exceptions import NotFound

from apps.inventory.models import SKU

from ..models import Customer, SalesOrder


def get_customer(customer_id) -> Customer:
    try:
        return Customer.objects.get(pk=customer_id)
    except Customer.DoesNotExist:
        raise NotFound("Customer not found")


def get_sales_order(order_id) -> SalesOrder:
    try:
        return SalesOrder.objects.get(pk=order_id)
    except SalesOrder.DoesNotExist:
        raise NotFound("Sales order not found")


def get_skus(sku_ids) -> dict:
    """Map of id -> SKU for every requested id; NotFound on the first missing one."""
    found = SKU.objects.in_bulk(set(sku_ids))
    for sku_id in sku_ids:
        if sku_id not in found:
            raise NotFound(f"SKU {sku_id} not found")
    return found
