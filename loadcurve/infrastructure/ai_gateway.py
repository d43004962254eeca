"""
Infrastructure adapter: OpenAI-compatible chat-completions gateway → RecommendationGateway.

All HTTP details (endpoint, bearer auth, payload shape, status mapping) are
confined here. Requests carry an explicit timeout and are never retried:
429 and 402 are surfaced to the caller as rate-limit and payment-required
conditions.
"""

import logging

import requests
from requests.exceptions import RequestException, Timeout
from django.conf import settings

from loadcurve.domain.exceptions import (
    GatewayNotConfigured,
    GatewayPaymentRequired,
    GatewayRateLimited,
    GatewayTimeout,
    GatewayUnavailable,
    RecommendationFormatError,
)
from loadcurve.domain.ports import RecommendationGateway

logger = logging.getLogger(__name__)


class ChatCompletionsGateway(RecommendationGateway):
    """Single-message chat completion against the configured AI gateway."""

    def __init__(self, url=None, api_key=None, model=None, timeout=None):
        self.url = url or settings.AI_GATEWAY_URL
        self.api_key = api_key if api_key is not None else settings.AI_GATEWAY_API_KEY
        self.model = model or settings.AI_GATEWAY_MODEL
        self.timeout = timeout if timeout is not None else settings.AI_GATEWAY_TIMEOUT

    def complete(self, prompt):
        if not self.api_key:
            logger.error("AI_GATEWAY_API_KEY is not configured")
            raise GatewayNotConfigured()

        logger.info("Calling AI gateway: model=%s prompt_chars=%s", self.model, len(prompt))
        try:
            response = requests.post(
                self.url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self.model,
                    "messages": [{"role": "user", "content": prompt}],
                },
                timeout=self.timeout,
            )
        except Timeout:
            logger.error("AI gateway timed out after %ss", self.timeout)
            raise GatewayTimeout(self.timeout)
        except RequestException as exc:
            logger.error("AI gateway unreachable: %s", exc)
            raise GatewayUnavailable()

        if not response.ok:
            logger.error("AI gateway error: status=%s body=%s", response.status_code, response.text[:500])
            if response.status_code == 429:
                raise GatewayRateLimited()
            if response.status_code == 402:
                raise GatewayPaymentRequired()
            raise GatewayUnavailable(response.status_code)

        try:
            body = response.json()
        except ValueError:
            logger.error("AI gateway returned a non-JSON body")
            raise RecommendationFormatError("No analysis result received")

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not content or not isinstance(content, str):
            logger.error("No content in AI gateway response")
            raise RecommendationFormatError("No analysis result received")

        logger.info("AI gateway response received")
        return content
