"""
Port (interface) for the ownership ledger.

The settlement use case depends only on this contract. The Django ORM
adapter in trading.infrastructure implements it against the relational
store; tests can substitute or wrap it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import ContextManager, Optional


@dataclass(frozen=True)
class AssetQuote:
    asset_id: str
    price_per_percent: Decimal


@dataclass(frozen=True)
class Holding:
    """Snapshot of one ownership row; version is None when no row exists."""

    percent: Decimal
    version: Optional[int]

    @property
    def exists(self) -> bool:
        return self.version is not None


NO_HOLDING = Holding(percent=Decimal("0"), version=None)


class OwnershipLedger(ABC):
    @abstractmethod
    def atomic(self) -> ContextManager:
        """Return a context manager scoping all writes of one settlement attempt."""
        ...

    @abstractmethod
    def get_asset(self, asset_id) -> AssetQuote:
        """Return the authoritative price of an asset.

        Raises:
            AssetNotFound: if the asset does not exist.
        """
        ...

    @abstractmethod
    def lock_asset(self, asset_id) -> None:
        """Serialize buys on one asset until the surrounding atomic block ends."""
        ...

    @abstractmethod
    def total_ownership(self, asset_id) -> Decimal:
        """Sum of ownership held by all users of an asset."""
        ...

    @abstractmethod
    def get_ownership(self, user_id, asset_id) -> Holding:
        ...

    @abstractmethod
    def upsert_ownership(self, user_id, asset_id, percent: Decimal, expected: Holding) -> None:
        """Write *percent*, provided the row still matches *expected*.

        Raises:
            OwnershipConflict: if the row was changed, created or removed
                since *expected* was read.
        """
        ...

    @abstractmethod
    def delete_ownership(self, user_id, asset_id, expected: Holding) -> None:
        """Remove the row, provided it still matches *expected*.

        Raises:
            OwnershipConflict: as for upsert_ownership.
        """
        ...

    @abstractmethod
    def append_transaction(
        self,
        asset_id,
        user_id,
        mode: str,
        percent: Decimal,
        price_per_percent: Decimal,
        total_price: Decimal,
    ) -> None:
        ...
