"""
Prompt construction and reply extraction for the investment-mix recommendation.

The gateway is an untrusted text producer. Its reply is reduced here to a
validated RecommendedMix or a RecommendationFormatError; raw reply text does
not travel further than this module.
"""

import json
import math
from dataclasses import dataclass
from typing import Optional

from loadcurve.domain.analysis import LoadCurveAnalysis
from loadcurve.domain.exceptions import RecommendationFormatError

PROMPT_TEMPLATE = """Based on the following load curve analysis, determine the optimal investment mix for renewable energy:

Load Curve Analysis:
- Total Annual Consumption: {totalConsumption:.2f} kWh
- Average Daily Consumption: {avgDailyConsumption:.2f} kWh
- Peak Load: {peakLoad:.4f} kW
- Time-of-Day Breakdown:
  * Night (00-06h): {night:.1f}%
  * Morning (06-12h): {morning:.1f}%
  * Afternoon (12-18h): {afternoon:.1f}%
  * Evening (18-24h): {evening:.1f}%
- Consumption Pattern: {pattern}
- Data Points Analyzed: {dataPoints}

Based on this analysis:
1. Recommend the optimal share of PV (solar), aligned with daytime consumption
2. Recommend the optimal share of Wind, covering night and winter needs and diversifying supply
3. Recommend the optimal share of Battery Storage, handling evening peaks and enabling load shifting

CRITICAL: Provide THREE single percentage numbers that sum to 100. Do NOT provide ranges. If you consider a range, always return the MINIMUM value from that range.

Format your response EXACTLY as:

{{
  "recommended_mix": {{
    "PV": <number>,
    "Wind": <number>,
    "Battery": <number>
  }}
}}

No explanation, just the JSON."""


@dataclass(frozen=True)
class RecommendedMix:
    pv: float
    wind: float
    battery: float

    def to_dict(self) -> dict:
        return {"PV": self.pv, "Wind": self.wind, "Battery": self.battery}


def build_prompt(analysis: LoadCurveAnalysis) -> str:
    """Embed the aggregate statistics (never the raw series) in the instruction."""
    return PROMPT_TEMPLATE.format(
        totalConsumption=analysis.total_consumption,
        avgDailyConsumption=analysis.avg_daily_consumption,
        peakLoad=analysis.peak_load,
        night=analysis.shares["night"],
        morning=analysis.shares["morning"],
        afternoon=analysis.shares["afternoon"],
        evening=analysis.shares["evening"],
        pattern=analysis.pattern,
        dataPoints=analysis.data_points,
    )


def first_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced ``{...}`` substring of *text*, or None.

    Braces inside JSON string literals do not count towards the balance.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def _mix_value(mix, field, reply):
    value = mix.get(field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RecommendationFormatError(reply=reply)
    # json.loads keeps integers of any size; float() overflows past ~1e308.
    try:
        magnitude = float(value)
    except OverflowError:
        raise RecommendationFormatError(reply=reply)
    if not math.isfinite(magnitude) or magnitude < 0:
        raise RecommendationFormatError(reply=reply)
    return value


def extract_recommended_mix(reply: str) -> RecommendedMix:
    """
    Pull the recommendation object out of free-text model output.

    The three numbers are passed through as received; whether they sum to
    100 is left to the caller.
    """
    candidate = first_json_object(reply or "")
    if candidate is None:
        raise RecommendationFormatError(reply=reply)

    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError:
        raise RecommendationFormatError(reply=reply)

    mix = payload.get("recommended_mix") if isinstance(payload, dict) else None
    if not isinstance(mix, dict):
        raise RecommendationFormatError(reply=reply)

    return RecommendedMix(
        pv=_mix_value(mix, "PV", reply),
        wind=_mix_value(mix, "Wind", reply),
        battery=_mix_value(mix, "Battery", reply),
    )
