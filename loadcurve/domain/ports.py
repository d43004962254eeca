"""
Port (interface) for the external recommendation service.
Infrastructure adapters (e.g. ChatCompletionsGateway) must implement this interface.
"""

from abc import ABC, abstractmethod


class RecommendationGateway(ABC):
    @abstractmethod
    def complete(self, prompt: str) -> str:
        """Send *prompt* to the model and return its free-text reply.

        Raises:
            GatewayError subclasses for configuration, transport and
            upstream status failures.
            RecommendationFormatError if the upstream body has no reply text.
        """
        ...
