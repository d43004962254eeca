class AnalysisError(Exception):
    """Base class for every load-curve request that cannot be answered."""


class LoadCurveError(AnalysisError):
    """Raised when the uploaded series cannot be summarized (no rows, zero span, zero total)."""


class RecommendationFormatError(AnalysisError):
    """Raised when the gateway reply does not hold a usable recommendation."""

    def __init__(self, message="Invalid analysis format", reply=None):
        self.reply = reply
        super().__init__(message)


class GatewayError(AnalysisError):
    """Base class for failures of the outbound recommendation gateway."""


class GatewayNotConfigured(GatewayError):
    def __init__(self):
        super().__init__("API configuration error")


class GatewayRateLimited(GatewayError):
    def __init__(self):
        super().__init__("Rate limit exceeded. Please try again in a moment.")


class GatewayPaymentRequired(GatewayError):
    def __init__(self):
        super().__init__("Payment required. Please add credits to your workspace.")


class GatewayTimeout(GatewayError):
    """Raised when the gateway does not answer within the configured timeout."""

    def __init__(self, timeout):
        self.timeout = timeout
        super().__init__(f"Recommendation service did not respond within {timeout:g}s")


class GatewayUnavailable(GatewayError):
    """Raised for connection failures and non-success statuses other than 402/429."""

    def __init__(self, status_code=None):
        self.status_code = status_code
        super().__init__("Failed to analyze data")


class AnalysisConfigurationError(AnalysisError):
    """Raised when a load-curve setting (e.g. LOAD_CURVE_TIME_ZONE) is unusable."""
