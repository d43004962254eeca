"""
Application Use Case — Load Curve Recommendation

Parses an uploaded load curve, summarizes it, and asks the recommendation
gateway for a PV / Wind / Battery investment mix based on that summary.

The use case holds no state between calls and never retries the gateway.
"""

import logging

from django.conf import settings

from loadcurve.domain.analysis import analyze_load_curve, parse_load_curve
from loadcurve.domain.recommendation import build_prompt, extract_recommended_mix
from loadcurve.infrastructure.ai_gateway import ChatCompletionsGateway

logger = logging.getLogger(__name__)


def recommend_investment_mix(file_content, gateway=None):
    """
    Returns (LoadCurveAnalysis, RecommendedMix) for raw CSV text.

    Raises:
    - LoadCurveError if the CSV yields nothing to analyze
    - GatewayError subclasses if the gateway is unconfigured or fails
    - RecommendationFormatError if the reply holds no usable recommendation
    """
    samples = parse_load_curve(file_content, settings.LOAD_CURVE_TIME_ZONE)
    logger.info("Parsed %s load curve samples", len(samples))

    analysis = analyze_load_curve(samples)
    logger.info(
        "Load curve analyzed: total=%.2f peak=%.4f pattern=%s",
        analysis.total_consumption, analysis.peak_load, analysis.pattern,
    )

    gateway = gateway or ChatCompletionsGateway()
    reply = gateway.complete(build_prompt(analysis))

    mix = extract_recommended_mix(reply)
    logger.info("Recommended mix: PV=%s Wind=%s Battery=%s", mix.pv, mix.wind, mix.battery)
    return analysis, mix
