"""
Load curve parsing and aggregation.

Input is CSV text with a header line followed by ``timestamp,value`` rows.
Parsing is lenient: rows with a missing field, an unparseable timestamp or
a non-numeric value are skipped rather than failing the whole upload.
Aggregation works on the samples sorted by timestamp.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pandas as pd

from loadcurve.domain.exceptions import AnalysisConfigurationError, LoadCurveError

logger = logging.getLogger(__name__)

NIGHT = "night"
MORNING = "morning"
AFTERNOON = "afternoon"
EVENING = "evening"

# Half-open hour ranges: [0, 6), [6, 12), [12, 18), [18, 24).
BUCKET_NAMES = [NIGHT, MORNING, AFTERNOON, EVENING]
BUCKET_EDGES = [0, 6, 12, 18, 24]

# bucket -> (label, minimum share in percent)
DRIVEN_PATTERNS = {
    AFTERNOON: ("daytime-driven", 35.0),
    EVENING: ("evening-driven", 35.0),
    NIGHT: ("night-driven", 30.0),
}
MIXED = "mixed"

# Relative words pandas would resolve to the current clock time.
RELATIVE_TIMESTAMPS = {"now", "today"}


@dataclass(frozen=True)
class LoadCurveSample:
    timestamp: datetime
    value: float


@dataclass(frozen=True)
class LoadCurveAnalysis:
    total_consumption: float
    avg_daily_consumption: float
    peak_load: float
    shares: Dict[str, float]
    pattern: str
    data_points: int
    start: datetime
    end: datetime
    span_days: float

    def to_dict(self) -> dict:
        """Rounded summary as returned to API clients."""
        return {
            "totalConsumption": round(self.total_consumption, 2),
            "avgDailyConsumption": round(self.avg_daily_consumption, 2),
            "peakLoad": round(self.peak_load, 4),
            "timeOfDay": {
                "night_00_06h": round(self.shares[NIGHT], 1),
                "morning_06_12h": round(self.shares[MORNING], 1),
                "afternoon_12_18h": round(self.shares[AFTERNOON], 1),
                "evening_18_24h": round(self.shares[EVENING], 1),
            },
            "pattern": self.pattern,
            "dataPoints": self.data_points,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "spanDays": round(self.span_days, 4),
        }


def _resolve_time_zone(time_zone):
    try:
        return ZoneInfo(time_zone)
    except (ZoneInfoNotFoundError, ValueError, TypeError):
        logger.error("LOAD_CURVE_TIME_ZONE is not a known time zone: %r", time_zone)
        raise AnalysisConfigurationError("Load curve time zone is misconfigured")


def _parse_timestamp(raw, zone):
    if raw.lower() in RELATIVE_TIMESTAMPS:
        raise ValueError(f"relative timestamp: {raw!r}")
    timestamp = pd.Timestamp(raw)
    if pd.isna(timestamp):
        raise ValueError(f"not a timestamp: {raw!r}")
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert(zone).tz_localize(None)
    return timestamp.to_pydatetime()


def parse_load_curve(content: str, time_zone: str = "UTC") -> List[LoadCurveSample]:
    """
    Parse CSV text into samples, in file order.

    Offset-aware timestamps are converted to *time_zone* and made naive;
    naive timestamps are kept as local wall-clock time. Words such as
    ``now`` are not timestamps and their rows are skipped.

    Raises AnalysisConfigurationError if *time_zone* is not a known zone.
    """
    zone = _resolve_time_zone(time_zone)
    samples = []
    skipped = 0
    for line in content.strip().splitlines()[1:]:
        fields = [field.strip().strip('"') for field in line.split(",")]
        if len(fields) < 2 or not fields[0] or not fields[1]:
            skipped += 1
            continue
        try:
            timestamp = _parse_timestamp(fields[0], zone)
            value = float(fields[1])
        except ValueError:
            skipped += 1
            continue
        if not math.isfinite(value):
            skipped += 1
            continue
        samples.append(LoadCurveSample(timestamp=timestamp, value=value))

    if skipped:
        logger.debug("Skipped %s unusable load curve rows", skipped)
    return samples


def classify_pattern(shares: Dict[str, float]) -> str:
    """
    Label the consumption profile by its dominant time-of-day bucket.

    Only a single strictly largest bucket can drive the label, and the
    morning bucket never does.
    """
    largest = max(shares.values())
    leaders = [name for name in BUCKET_NAMES if shares[name] == largest]
    if len(leaders) != 1:
        return MIXED

    driven = DRIVEN_PATTERNS.get(leaders[0])
    if driven is None:
        return MIXED
    label, threshold = driven
    return label if largest > threshold else MIXED


def analyze_load_curve(samples: List[LoadCurveSample]) -> LoadCurveAnalysis:
    if not samples:
        raise LoadCurveError("No data to analyze")

    frame = pd.DataFrame(
        {
            "timestamp": [sample.timestamp for sample in samples],
            "value": [sample.value for sample in samples],
        }
    ).sort_values("timestamp", kind="stable")

    start = frame["timestamp"].iloc[0]
    end = frame["timestamp"].iloc[-1]
    span_days = (end - start) / pd.Timedelta(days=1)
    if span_days == 0:
        raise LoadCurveError("Load curve must span more than a single point in time")

    total = float(frame["value"].sum())
    if total == 0:
        raise LoadCurveError("Load curve has zero total consumption")

    buckets = pd.cut(
        frame["timestamp"].dt.hour,
        bins=BUCKET_EDGES,
        right=False,
        labels=BUCKET_NAMES,
    )
    bucket_sums = (
        frame["value"]
        .groupby(buckets, observed=False)
        .sum()
        .reindex(BUCKET_NAMES, fill_value=0.0)
    )
    shares = {name: float(bucket_sums[name]) / total * 100 for name in BUCKET_NAMES}

    return LoadCurveAnalysis(
        total_consumption=total,
        avg_daily_consumption=total / span_days,
        peak_load=float(frame["value"].max()),
        shares=shares,
        pattern=classify_pattern(shares),
        data_points=len(frame),
        start=start.to_pydatetime(),
        end=end.to_pydatetime(),
        span_days=float(span_days),
    )
