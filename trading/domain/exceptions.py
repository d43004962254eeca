class TradeError(Exception):
    """Base class for every trade that cannot be settled."""


class TradeValidationError(TradeError):
    """Raised when a trade request is missing fields or carries out-of-range values."""


class AssetNotFound(TradeError):
    """Raised when a trade references an asset that does not exist."""

    def __init__(self, asset_id):
        self.asset_id = asset_id
        super().__init__("Asset not found")


class ExceedsFullOwnership(TradeError):
    """Raised when a buy would leave the user owning more than 100% of an asset."""

    def __init__(self, asset_id, current, requested):
        self.asset_id = asset_id
        self.current = current
        self.requested = requested
        super().__init__("Cannot own more than 100% of an asset")


class InsufficientAvailability(TradeError):
    """Raised when a buy asks for more than the unowned share of an asset."""

    def __init__(self, asset_id, requested, available):
        self.asset_id = asset_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Only {available}% of this asset is available, requested {requested}%"
        )


class InsufficientOwnership(TradeError):
    """Raised when a user tries to sell more than they own."""

    def __init__(self, asset_id, current, requested):
        self.asset_id = asset_id
        self.current = current
        self.requested = requested
        super().__init__("Insufficient ownership to sell")


class OwnershipConflict(TradeError):
    """Raised when an ownership row changed between read and write."""

    def __init__(self, user_id, asset_id):
        self.user_id = user_id
        self.asset_id = asset_id
        super().__init__(
            "Ownership changed while the trade was being settled. Please retry."
        )
