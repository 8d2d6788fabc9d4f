import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def timestamp_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("inventory", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Supplier",
            fields=timestamp_fields() + [
                ("name", models.CharField(max_length=255)),
                ("contact_person", models.CharField(max_length=255)),
                ("email", models.EmailField(max_length=254)),
                ("phone", models.CharField(max_length=32)),
                ("alternate_phone", models.CharField(blank=True, max_length=32)),
                ("street", models.CharField(max_length=255)),
                ("city", models.CharField(max_length=100)),
                ("state", models.CharField(max_length=100)),
                ("pincode", models.CharField(max_length=20)),
                ("tax_id", models.CharField(blank=True, default="", max_length=50)),
                ("payment_terms", models.CharField(default="Net 30", max_length=50)),
                ("notes", models.TextField(blank=True, default="")),
                ("status", models.CharField(choices=[("active", "Active"), ("inactive", "Inactive")], default="active", max_length=20)),
                ("categories", models.JSONField(blank=True, default=list)),
                ("lead_time", models.PositiveIntegerField(default=7, help_text="Lead time in days")),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="PurchaseIndent",
            fields=timestamp_fields() + [
                ("indent_id", models.PositiveIntegerField(editable=False, unique=True)),
                ("status", models.CharField(choices=[("Pending", "Pending"), ("Approved", "Approved"), ("PO Pending", "PO Pending"), ("PO Created", "PO Created"), ("Deleted", "Deleted")], default="Pending", max_length=20)),
                ("approved_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="PurchaseIndentItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField()),
                ("indent", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="procurement.purchaseindent")),
                ("sku", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="inventory.sku")),
                ("vendor", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="procurement.supplier")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="PurchaseIndentApproval",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("indent_number", models.PositiveIntegerField(help_text="indent_id of the approved indent")),
                ("status", models.CharField(choices=[("PO Pending", "PO Pending"), ("PO Created", "PO Created"), ("Cancelled", "Cancelled")], default="PO Pending", max_length=20)),
                ("approval_remarks", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("approved_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("indent", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="approvals", to="procurement.purchaseindent")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="PurchaseIndentApprovalItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField()),
                ("approval", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="procurement.purchaseindentapproval")),
                ("sku", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="inventory.sku")),
                ("vendor", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="procurement.supplier")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="PurchaseOrder",
            fields=timestamp_fields() + [
                ("po_number", models.PositiveIntegerField(editable=False, unique=True)),
                ("delivery_due_date", models.DateField(blank=True, null=True)),
                ("payment_days", models.CharField(blank=True, default="", max_length=50)),
                ("freight", models.CharField(blank=True, default="", max_length=100)),
                ("status", models.CharField(choices=[("Issued", "Issued"), ("Partially Received", "Partially Received"), ("Received", "Received"), ("Cancelled", "Cancelled")], default="Issued", max_length=20)),
                ("stock_in_status", models.CharField(choices=[("Pending to be Stock In", "Pending to be Stock In"), ("Stocked In", "Stocked In")], default="Pending to be Stock In", max_length=30)),
                ("stocked_in_at", models.DateTimeField(blank=True, null=True)),
                ("indent_approvals", models.ManyToManyField(blank=True, related_name="purchase_orders", to="procurement.purchaseindentapproval")),
                ("vendor", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="purchase_orders", to="procurement.supplier")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="PurchaseOrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField()),
                ("unit_price", models.DecimalField(blank=True, decimal_places=2, help_text="Defaults to the SKU purchase price when stocking in", max_digits=14, null=True)),
                ("purchase_order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="procurement.purchaseorder")),
                ("sku", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="inventory.sku")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
