import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


def timestamp_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
    ]


def money(**kwargs):
    return models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16, **kwargs)


def priced_line_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("quantity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
        ("unit_price", models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(0)])),
        ("discount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, validators=[django.core.validators.MinValueValidator(0)])),
        ("tax", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, validators=[django.core.validators.MinValueValidator(0)])),
        ("total_amount", models.DecimalField(decimal_places=2, max_digits=16)),
        ("sku", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="inventory.sku")),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("inventory", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=timestamp_fields() + [
                ("name", models.CharField(max_length=255)),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("phone", models.CharField(blank=True, max_length=20)),
                ("address", models.TextField(blank=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="SalesOrder",
            fields=timestamp_fields() + [
                ("order_number", models.CharField(editable=False, max_length=20, unique=True)),
                ("order_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("expected_delivery_date", models.DateField(blank=True, null=True)),
                ("subtotal", money()),
                ("total_discount", money()),
                ("total_tax", money()),
                ("total_amount", money()),
                ("status", models.CharField(choices=[("draft", "Draft"), ("confirmed", "Confirmed"), ("pending_dispatch", "Pending Dispatch"), ("dispatched", "Dispatched"), ("delivered", "Delivered"), ("cancelled", "Cancelled"), ("returned", "Returned")], default="pending_dispatch", max_length=20)),
                ("dispatch_status", models.CharField(choices=[("pending", "Pending"), ("partial", "Partial"), ("completed", "Completed")], default="pending", max_length=20)),
                ("notes", models.TextField(blank=True)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("approved_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("customer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="sales_orders", to="sales.customer")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["status", "order_date"], name="so_status_date_idx"),
                    models.Index(fields=["customer", "status"], name="so_customer_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SalesOrderItem",
            fields=priced_line_fields() + [
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="sales.salesorder")),
            ],
            options={
                "ordering": ["id"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="DispatchedItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField()),
                ("dispatched_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="dispatched_items", to="sales.salesorder")),
                ("sku", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="inventory.sku")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="StockAllocation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField()),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="allocated_stock", to="sales.salesorder")),
                ("sku", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="inventory.sku")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=timestamp_fields() + [
                ("invoice_number", models.CharField(editable=False, max_length=20, unique=True)),
                ("invoice_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("due_date", models.DateField()),
                ("subtotal", money()),
                ("total_discount", money()),
                ("total_tax", money()),
                ("total_amount", money()),
                ("paid_amount", money()),
                ("status", models.CharField(choices=[("draft", "Draft"), ("sent", "Sent"), ("paid", "Paid"), ("partially_paid", "Partially Paid"), ("overdue", "Overdue"), ("cancelled", "Cancelled")], default="draft", max_length=20)),
                ("payment_terms", models.CharField(default="Net 30", max_length=50)),
                ("notes", models.TextField(blank=True)),
                ("paid_at", models.DateTimeField(blank=True, help_text="First time the invoice reached paid", null=True)),
                ("customer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="invoices", to="sales.customer")),
                ("sales_order", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="invoices", to="sales.salesorder")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [models.Index(fields=["status", "due_date"], name="invoice_status_due_idx")],
            },
        ),
        migrations.CreateModel(
            name="InvoiceItem",
            fields=priced_line_fields() + [
                ("invoice", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="sales.invoice")),
            ],
            options={
                "ordering": ["id"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="SalesReturn",
            fields=timestamp_fields() + [
                ("return_number", models.CharField(editable=False, max_length=20, unique=True)),
                ("return_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("reason", models.CharField(choices=[("damaged", "Damaged"), ("defective", "Defective"), ("wrong_item", "Wrong Item"), ("customer_request", "Customer Request"), ("quality_issue", "Quality Issue"), ("other", "Other")], max_length=20)),
                ("action_required", models.CharField(choices=[("refund", "Refund"), ("exchange", "Exchange"), ("repair", "Repair"), ("credit_note", "Credit Note")], max_length=20)),
                ("total_amount", money()),
                ("status", models.CharField(choices=[("pending", "Pending"), ("approved", "Approved"), ("processed", "Processed"), ("rejected", "Rejected")], default="pending", max_length=20)),
                ("notes", models.TextField(blank=True)),
                ("processed_at", models.DateTimeField(blank=True, null=True)),
                ("customer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="sales_returns", to="sales.customer")),
                ("processed_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("sales_order", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="returns", to="sales.salesorder")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="SalesReturnItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField()),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=14)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=16)),
                ("sales_return", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="sales.salesreturn")),
                ("sku", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="inventory.sku")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
