from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("inventory", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="stocktransaction",
            name="type",
            field=models.CharField(
                choices=[
                    ("inbound", "Inbound"),
                    ("outbound", "Outbound"),
                    ("sales", "Sales"),
                    ("reserved", "Reserved"),
                    ("released", "Released"),
                ],
                max_length=10,
            ),
        ),
    ]
