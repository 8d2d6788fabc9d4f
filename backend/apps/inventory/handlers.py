import logging

from shared.event_bus import event_bus

from .models import SKU

logger = logging.getLogger(__name__)

STOCK_EVENTS = (
    "stock.reserved",
    "stock.released",
    "stock.consumed",
    "stock.credited",
    "stock.sale_recorded",
    "stock.sales_settled",
)


def warn_on_low_stock(sender, sku_id=None, **kwargs):
    """Log a warning when a consumption leaves a SKU at or below its reorder level."""
    sku = SKU.objects.filter(pk=sku_id).only("code", "current_stock", "min_stock").first()
    if sku and sku.is_below_minimum:
        logger.warning(
            f"SKU {sku.code} is at {sku.current_stock} units, at or below its minimum of {sku.min_stock}"
        )
    return sku_id


def register():
    for event_name in STOCK_EVENTS:
        event_bus.register_event(event_name)
    event_bus.subscribe("stock.consumed", warn_on_low_stock)
