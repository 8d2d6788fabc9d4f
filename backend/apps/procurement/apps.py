from django.apps import AppConfig


class ProcurementConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.procurement'
    verbose_name = 'Procurement'

    def ready(self):
        from shared.event_bus import event_bus

        for event_name in ("purchase_indent.approved", "purchase_order.created", "purchase_order.stocked_in"):
            event_bus.register_event(event_name)
