from decimal import Decimal

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group

from apps.inventory.models import SKU
from apps.sales.models import Customer


class SalesFixtureMixin:
    """Users, a customer and two SKUs with stock on hand."""

    def setUp(self):
        super().setUp()
        User = get_user_model()
        self.user = User.objects.create_user(username="clerk", password="pass123", email="clerk@example.com")
        self.manager = User.objects.create_user(username="boss", password="pass123", email="boss@example.com")
        self.manager.groups.add(Group.objects.create(name="manager"))
        self.customer = Customer.objects.create(name="Acme Traders", email="buy@acme.test", phone="555-0100")
        self.widget = SKU.objects.create(code="WID-1", name="Widget", current_stock=100, selling_price=Decimal("5.00"))
        self.gadget = SKU.objects.create(code="GAD-1", name="Gadget", current_stock=20, selling_price=Decimal("12.50"))

    def line(self, sku, quantity, unit_price="5.00", discount="0", tax="0"):
        return {
            "sku": sku.pk,
            "quantity": quantity,
            "unit_price": Decimal(unit_price),
            "discount": Decimal(discount),
            "tax": Decimal(tax),
        }
