"""
Application Use Case — Trade Settlement

Applies a buy or sell of an ownership percentage to the ledger and records
the trade.

Core guarantees provided:

- Atomicity: the ownership write and the transaction record are committed
  together inside one ledger.atomic() block, or not at all.
- Lost-update safety: the ownership write is a compare-and-swap on the
  version read at the start of the attempt. A conflict rolls the attempt
  back and the read/compute/write cycle runs again, up to a bounded number
  of retries.
- Asset-level cap: buys lock the asset row and re-check that the combined
  ownership of all users stays within 100%.
- Authoritative pricing: the recorded price is the asset's own
  price_per_percent. The caller's price is only compared against it.
- Explicit domain signaling: business rule violations raise
  domain-specific exceptions.
"""

import logging

from django.conf import settings

from trading.domain.exceptions import OwnershipConflict
from trading.domain.settlement import BUY, check_availability, compute_new_ownership, total_price
from trading.infrastructure.django_ledger import DjangoOwnershipLedger

logger = logging.getLogger(__name__)


def settle_trade(trade, ledger=None, max_retries=None):
    """
    Settles a validated TradeRequest and returns the resulting position.

    Raises:
    - AssetNotFound if the asset does not exist
    - ExceedsFullOwnership / InsufficientAvailability on an oversized buy
    - InsufficientOwnership on an oversized sell
    - OwnershipConflict if every retry lost a race with another writer
    """
    ledger = ledger or DjangoOwnershipLedger()
    if max_retries is None:
        max_retries = settings.TRADE_MAX_CONFLICT_RETRIES

    quote = ledger.get_asset(trade.asset_id)
    if quote.price_per_percent != trade.price_per_percent:
        logger.warning(
            "Caller price ignored: asset=%s submitted=%s authoritative=%s",
            trade.asset_id, trade.price_per_percent, quote.price_per_percent,
        )
    price = quote.price_per_percent
    amount = total_price(trade.percentage, price)

    logger.info(
        "Processing %s trade: user=%s asset=%s percentage=%s",
        trade.mode, trade.user_id, trade.asset_id, trade.percentage,
    )

    for attempt in range(1, max_retries + 2):
        holding = ledger.get_ownership(trade.user_id, trade.asset_id)
        new_percent = compute_new_ownership(
            trade.asset_id, trade.mode, holding.percent, trade.percentage
        )

        try:
            with ledger.atomic():
                if trade.mode == BUY:
                    ledger.lock_asset(trade.asset_id)
                    check_availability(
                        trade.asset_id,
                        ledger.total_ownership(trade.asset_id),
                        trade.percentage,
                    )

                if new_percent == 0:
                    ledger.delete_ownership(trade.user_id, trade.asset_id, holding)
                else:
                    ledger.upsert_ownership(trade.user_id, trade.asset_id, new_percent, holding)

                ledger.append_transaction(
                    trade.asset_id,
                    trade.user_id,
                    trade.mode,
                    trade.percentage,
                    price,
                    amount,
                )
        except OwnershipConflict:
            logger.info(
                "Ownership conflict, retrying: user=%s asset=%s attempt=%s",
                trade.user_id, trade.asset_id, attempt,
            )
            continue

        logger.info(
            "Trade settled: user=%s asset=%s ownership %s -> %s total_price=%s",
            trade.user_id, trade.asset_id, holding.percent, new_percent, amount,
        )
        return {
            "asset_id": trade.asset_id,
            "user_id": trade.user_id,
            "new_ownership": new_percent,
            "price_per_percent": price,
            "total_price": amount,
        }

    logger.warning(
        "Giving up after %s conflicting attempts: user=%s asset=%s",
        max_retries + 1, trade.user_id, trade.asset_id,
    )
    raise OwnershipConflict(trade.user_id, trade.asset_id)
