"""
Pure settlement rules: request validation, ownership arithmetic and pricing.

Nothing here touches the database, so the rules can be exercised on their
own and reused by any ledger adapter.
"""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from trading.domain.exceptions import (
    ExceedsFullOwnership,
    InsufficientAvailability,
    InsufficientOwnership,
    TradeValidationError,
)

BUY = "buy"
SELL = "sell"

FULL_OWNERSHIP = Decimal("100")
PERCENT_PLACES = Decimal("0.0001")
MONEY_PLACES = Decimal("0.01")

REQUIRED_FIELDS = ("assetId", "userId", "percentage", "mode", "pricePerPercent")


@dataclass(frozen=True)
class TradeRequest:
    asset_id: uuid.UUID
    user_id: uuid.UUID
    percentage: Decimal
    mode: str
    price_per_percent: Decimal


def _to_decimal(value, field):
    # bool is an int subclass; JSON true must not count as 1.
    if isinstance(value, bool):
        raise TradeValidationError(f"{field} must be a number")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise TradeValidationError(f"{field} must be a number")
    if not number.is_finite():
        raise TradeValidationError(f"{field} must be a number")
    return number


def _to_uuid(value, field):
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise TradeValidationError(f"{field} must be a valid UUID")


def parse_trade_request(payload) -> TradeRequest:
    """
    Validate a raw trade payload and convert it to typed values.

    Percentages carry at most four decimal places, matching the stored
    precision, so a trade never records a different amount than requested.
    """
    if not isinstance(payload, Mapping):
        raise TradeValidationError("Request body must be a JSON object")
    if any(payload.get(field) in (None, "") for field in REQUIRED_FIELDS):
        raise TradeValidationError("Missing required fields")

    mode = payload["mode"]
    if mode not in (BUY, SELL):
        raise TradeValidationError("mode must be 'buy' or 'sell'")

    percentage = _to_decimal(payload["percentage"], "percentage")
    if percentage <= 0 or percentage > FULL_OWNERSHIP:
        raise TradeValidationError("Invalid percentage")
    if percentage != percentage.quantize(PERCENT_PLACES, rounding=ROUND_HALF_EVEN):
        raise TradeValidationError("percentage supports at most 4 decimal places")

    price = _to_decimal(payload["pricePerPercent"], "pricePerPercent")
    if price <= 0:
        raise TradeValidationError("pricePerPercent must be positive")

    return TradeRequest(
        asset_id=_to_uuid(payload["assetId"], "assetId"),
        user_id=_to_uuid(payload["userId"], "userId"),
        percentage=percentage,
        mode=mode,
        price_per_percent=price,
    )


def compute_new_ownership(asset_id, mode, current: Decimal, percentage: Decimal) -> Decimal:
    if mode == BUY:
        new_percent = current + percentage
        if new_percent > FULL_OWNERSHIP:
            raise ExceedsFullOwnership(asset_id, current, percentage)
        return new_percent

    if current < percentage:
        raise InsufficientOwnership(asset_id, current, percentage)
    return current - percentage


def check_availability(asset_id, total_owned: Decimal, percentage: Decimal) -> None:
    """Reject a buy that would push the asset's combined ownership past 100%."""
    available = FULL_OWNERSHIP - total_owned
    if percentage > available:
        raise InsufficientAvailability(asset_id, percentage, available)


def total_price(percentage: Decimal, price_per_percent: Decimal) -> Decimal:
    """Trade value rounded half-even to cents."""
    return (percentage * price_per_percent).quantize(MONEY_PLACES, rounding=ROUND_HALF_EVEN)
