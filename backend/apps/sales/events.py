from shared.event_bus import event_bus

SALES_EVENTS = (
    "sales_order.created",
    "sales_order.confirmed",
    "sales_order.status_changed",
    "sales_order.dispatched",
    "invoice.created",
    "invoice.paid",
    "invoice.deleted",
    "sales_return.created",
    "sales_return.processed",
)


def register():
    for event_name in SALES_EVENTS:
        event_bus.register_event(event_name)
