import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Asset",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("type", models.CharField(choices=[("PV", "PV"), ("Wind", "Wind"), ("Battery", "Battery")], max_length=16)),
                ("description", models.TextField(blank=True, default="")),
                ("total_capacity_kw", models.DecimalField(decimal_places=2, max_digits=12)),
                ("location", models.CharField(blank=True, default="", max_length=200)),
                ("price_per_percent", models.DecimalField(decimal_places=2, max_digits=12)),
                ("image_url", models.URLField(blank=True, default="", max_length=500)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="OwnershipRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.UUIDField(db_index=True)),
                ("ownership_percent", models.DecimalField(decimal_places=4, max_digits=7)),
                ("version", models.PositiveIntegerField(default=1)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("asset", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="ownerships", to="trading.asset")),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("user_id", "asset"), name="unique_ownership_per_user_asset"),
                    models.CheckConstraint(
                        condition=models.Q(("ownership_percent__gt", 0), ("ownership_percent__lte", 100)),
                        name="ownership_percent_in_range",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="TransactionRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("buyer_id", models.UUIDField(blank=True, db_index=True, null=True)),
                ("seller_id", models.UUIDField(blank=True, db_index=True, null=True)),
                ("percent_traded", models.DecimalField(decimal_places=4, max_digits=7)),
                ("price_per_percent", models.DecimalField(decimal_places=2, max_digits=12)),
                ("total_price", models.DecimalField(decimal_places=2, max_digits=14)),
                ("transaction_type", models.CharField(choices=[("buy", "buy"), ("sell", "sell")], max_length=4)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("asset", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="transactions", to="trading.asset")),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("percent_traded__gt", 0), ("percent_traded__lte", 100)),
                        name="percent_traded_in_range",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("transaction_type__in", ["buy", "sell"])),
                        name="transaction_type_valid",
                    ),
                ],
            },
        ),
    ]
