"""
Persistence Models — Energy Asset Marketplace (Django ORM)

This module defines the persistence layer for fractional ownership of
energy assets: the asset catalogue, the ownership ledger and the
append-only transaction log.

Key architectural decisions:

- Asset is read-only from the settlement path. Its price is the
  authoritative price for every trade.
- OwnershipRecord holds one row per (user, asset). Uniqueness and the
  (0, 100] range are enforced at the database level, not only in Python.
- OwnershipRecord.version is an optimistic concurrency token. Every write
  is conditional on the version that was read, so two concurrent trades
  on the same row cannot silently overwrite each other.
- TransactionRecord rows are never updated or deleted. Exactly one of
  buyer_id / seller_id is populated; counterparties are not modelled.

User identities come from the external identity provider, so they are
stored as plain UUIDs rather than foreign keys to a local user table.
"""

import uuid

from django.db import models
from django.db.models import Q


class AssetType(models.TextChoices):
    PV = "PV", "PV"
    WIND = "Wind", "Wind"
    BATTERY = "Battery", "Battery"


class TransactionType(models.TextChoices):
    BUY = "buy", "buy"
    SELL = "sell", "sell"


class Asset(models.Model):
    """A tradable energy installation, split into ownership percentages."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    type = models.CharField(max_length=16, choices=AssetType.choices)
    description = models.TextField(blank=True, default="")
    total_capacity_kw = models.DecimalField(max_digits=12, decimal_places=2)
    location = models.CharField(max_length=200, blank=True, default="")
    price_per_percent = models.DecimalField(max_digits=12, decimal_places=2)
    image_url = models.URLField(max_length=500, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} ({self.type})"


class OwnershipRecord(models.Model):
    """
    The share of one asset held by one user.

    A row only exists while the user holds a positive share: selling the
    full position deletes it.
    """

    user_id = models.UUIDField(db_index=True)
    asset = models.ForeignKey(
        Asset,
        on_delete=models.CASCADE,
        related_name="ownerships",
    )
    ownership_percent = models.DecimalField(max_digits=7, decimal_places=4)

    # Incremented on every write; writes are conditional on the value read.
    version = models.PositiveIntegerField(default=1)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "asset"],
                name="unique_ownership_per_user_asset",
            ),
            models.CheckConstraint(
                condition=Q(ownership_percent__gt=0) & Q(ownership_percent__lte=100),
                name="ownership_percent_in_range",
            ),
        ]

    def __str__(self):
        return f"{self.user_id} owns {self.ownership_percent}% of {self.asset_id}"


class TransactionRecord(models.Model):
    """
    Immutable log entry for a settled trade.

    total_price is computed once at settlement time and stored, so later
    price changes on the asset do not rewrite history.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    asset = models.ForeignKey(
        Asset,
        on_delete=models.CASCADE,
        related_name="transactions",
    )
    buyer_id = models.UUIDField(null=True, blank=True, db_index=True)
    seller_id = models.UUIDField(null=True, blank=True, db_index=True)
    percent_traded = models.DecimalField(max_digits=7, decimal_places=4)
    price_per_percent = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=14, decimal_places=2)
    transaction_type = models.CharField(max_length=4, choices=TransactionType.choices)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(percent_traded__gt=0) & Q(percent_traded__lte=100),
                name="percent_traded_in_range",
            ),
            models.CheckConstraint(
                condition=Q(transaction_type__in=["buy", "sell"]),
                name="transaction_type_valid",
            ),
        ]

    def __str__(self):
        return f"Transaction {self.id} - {self.transaction_type} {self.percent_traded}%"
