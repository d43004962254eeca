from decimal import Decimal

from django.db import migrations

SAMPLE_ASSETS = [
    {
        "name": "Solar Farm Alpha",
        "type": "PV",
        "description": "Large-scale solar installation with 5000 panels",
        "total_capacity_kw": Decimal("2000"),
        "location": "California, USA",
        "price_per_percent": Decimal("150"),
        "image_url": "https://images.unsplash.com/photo-1509391366360-2e959784a276?w=800",
    },
    {
        "name": "Wind Turbine Beta",
        "type": "Wind",
        "description": "Offshore wind farm with 10 turbines",
        "total_capacity_kw": Decimal("5000"),
        "location": "North Sea, UK",
        "price_per_percent": Decimal("200"),
        "image_url": "https://images.unsplash.com/photo-1532601224476-15c79f2f7a51?w=800",
    },
    {
        "name": "Battery Storage Gamma",
        "type": "Battery",
        "description": "Grid-scale lithium-ion battery system",
        "total_capacity_kw": Decimal("1000"),
        "location": "Texas, USA",
        "price_per_percent": Decimal("100"),
        "image_url": "https://images.unsplash.com/photo-1620287341056-49a2f1ab2fdc?w=800",
    },
    {
        "name": "Solar Park Delta",
        "type": "PV",
        "description": "Community solar project serving 500 homes",
        "total_capacity_kw": Decimal("1500"),
        "location": "Arizona, USA",
        "price_per_percent": Decimal("120"),
        "image_url": "https://images.unsplash.com/photo-1508514177221-188b1cf16e9d?w=800",
    },
    {
        "name": "Wind Farm Epsilon",
        "type": "Wind",
        "description": "Onshore wind installation with 15 turbines",
        "total_capacity_kw": Decimal("7500"),
        "location": "Scotland, UK",
        "price_per_percent": Decimal("250"),
        "image_url": "https://images.unsplash.com/photo-1548337138-e87d889cc369?w=800",
    },
]


def seed_assets(apps, schema_editor):
    Asset = apps.get_model("trading", "Asset")
    for fields in SAMPLE_ASSETS:
        Asset.objects.get_or_create(name=fields["name"], defaults=fields)


def remove_assets(apps, schema_editor):
    Asset = apps.get_model("trading", "Asset")
    Asset.objects.filter(name__in=[fields["name"] for fields in SAMPLE_ASSETS]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("trading", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_assets, remove_assets),
    ]
