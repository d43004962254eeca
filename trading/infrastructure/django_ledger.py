"""
Infrastructure adapter: Django ORM → OwnershipLedger.

Every ownership write is a compare-and-swap on OwnershipRecord.version:

- update: UPDATE ... WHERE version = <read version>, version = version + 1
- delete: DELETE ... WHERE version = <read version>
- insert: relies on the (user_id, asset) unique constraint

Zero affected rows, or an IntegrityError on insert, means another request
wrote the row first; the adapter reports that as OwnershipConflict and the
caller decides whether to retry.
"""

import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import F, Sum

from trading.domain.exceptions import AssetNotFound, OwnershipConflict
from trading.domain.ports import NO_HOLDING, AssetQuote, Holding, OwnershipLedger
from trading.domain.settlement import BUY
from trading.models import Asset, OwnershipRecord, TransactionRecord

logger = logging.getLogger(__name__)


class DjangoOwnershipLedger(OwnershipLedger):
    """Ownership ledger stored in the default Django database."""

    def atomic(self):
        return transaction.atomic()

    def get_asset(self, asset_id):
        try:
            asset = Asset.objects.only("id", "price_per_percent").get(id=asset_id)
        except Asset.DoesNotExist:
            raise AssetNotFound(asset_id)
        return AssetQuote(asset_id=str(asset.id), price_per_percent=asset.price_per_percent)

    def lock_asset(self, asset_id):
        # Row lock on databases that support it; a no-op on SQLite, which
        # serializes writers anyway.
        list(Asset.objects.select_for_update().filter(id=asset_id).values_list("id", flat=True))

    def total_ownership(self, asset_id):
        total = OwnershipRecord.objects.filter(asset_id=asset_id).aggregate(
            total=Sum("ownership_percent")
        )["total"]
        return total if total is not None else Decimal("0")

    def get_ownership(self, user_id, asset_id):
        row = (
            OwnershipRecord.objects
            .filter(user_id=user_id, asset_id=asset_id)
            .values("ownership_percent", "version")
            .first()
        )
        if row is None:
            return NO_HOLDING
        return Holding(percent=row["ownership_percent"], version=row["version"])

    def upsert_ownership(self, user_id, asset_id, percent, expected):
        if expected.exists:
            updated = (
                OwnershipRecord.objects
                .filter(user_id=user_id, asset_id=asset_id, version=expected.version)
                .update(ownership_percent=percent, version=F("version") + 1)
            )
            if updated == 0:
                raise OwnershipConflict(user_id, asset_id)
            return

        try:
            # Savepoint so a duplicate insert does not poison the outer transaction.
            with transaction.atomic():
                OwnershipRecord.objects.create(
                    user_id=user_id,
                    asset_id=asset_id,
                    ownership_percent=percent,
                )
        except IntegrityError:
            logger.info(
                "Ownership row created concurrently: user=%s asset=%s",
                user_id, asset_id,
            )
            raise OwnershipConflict(user_id, asset_id)

    def delete_ownership(self, user_id, asset_id, expected):
        deleted, _ = (
            OwnershipRecord.objects
            .filter(user_id=user_id, asset_id=asset_id, version=expected.version)
            .delete()
        )
        if deleted == 0:
            raise OwnershipConflict(user_id, asset_id)

    def append_transaction(self, asset_id, user_id, mode, percent, price_per_percent, total_price):
        TransactionRecord.objects.create(
            asset_id=asset_id,
            buyer_id=user_id if mode == BUY else None,
            seller_id=None if mode == BUY else user_id,
            percent_traded=percent,
            price_per_percent=price_per_percent,
            total_price=total_price,
            transaction_type=mode,
        )
