"""
Read-side queries for the marketplace: catalogue, portfolio and history.

These never write, so they go straight to the ORM without the ledger port.
"""

from decimal import Decimal

from django.db.models import DecimalField, Q, Sum
from django.db.models.functions import Coalesce

from trading.domain.settlement import FULL_OWNERSHIP, MONEY_PLACES
from trading.models import Asset, OwnershipRecord, TransactionRecord

ZERO = Decimal("0")


def list_assets():
    """All assets, newest first, with the share still available to buy."""
    assets = Asset.objects.annotate(
        owned_percent=Coalesce(
            Sum("ownerships__ownership_percent"),
            ZERO,
            output_field=DecimalField(max_digits=9, decimal_places=4),
        ),
    ).order_by("-created_at")

    return [
        {
            "id": str(asset.id),
            "name": asset.name,
            "type": asset.type,
            "description": asset.description,
            "total_capacity_kw": asset.total_capacity_kw,
            "location": asset.location,
            "price_per_percent": asset.price_per_percent,
            "image_url": asset.image_url,
            "available_percent": FULL_OWNERSHIP - asset.owned_percent,
            "created_at": asset.created_at,
        }
        for asset in assets
    ]


def get_portfolio(user_id):
    holdings = (
        OwnershipRecord.objects
        .filter(user_id=user_id)
        .select_related("asset")
        .order_by("asset__name")
    )

    items = []
    total_value = ZERO
    for holding in holdings:
        asset = holding.asset
        value = (holding.ownership_percent * asset.price_per_percent).quantize(MONEY_PLACES)
        capacity_share = (holding.ownership_percent / FULL_OWNERSHIP * asset.total_capacity_kw).quantize(MONEY_PLACES)
        total_value += value
        items.append({
            "asset_id": str(asset.id),
            "asset_name": asset.name,
            "asset_type": asset.type,
            "ownership_percent": holding.ownership_percent,
            "value": value,
            "capacity_share_kw": capacity_share,
        })

    return {
        "user_id": str(user_id),
        "total_value": total_value,
        "holdings": items,
    }


def get_transaction_history(user_id):
    """Trades where the user was buyer or seller, newest first."""
    transactions = (
        TransactionRecord.objects
        .filter(Q(buyer_id=user_id) | Q(seller_id=user_id))
        .select_related("asset")
        .order_by("-created_at")
    )

    return [
        {
            "id": str(tx.id),
            "asset_id": str(tx.asset_id),
            "asset_name": tx.asset.name,
            "asset_type": tx.asset.type,
            "transaction_type": tx.transaction_type,
            "percent_traded": tx.percent_traded,
            "price_per_percent": tx.price_per_percent,
            "total_price": tx.total_price,
            "created_at": tx.created_at,
        }
        for tx in transactions
    ]
