"""Normalization primitives shared by every factor calculator.

None of these raise; each always returns a finite number.
"""

from __future__ import annotations

import math

EPSILON = 1e-9

SCORE_MIN = 0.0
SCORE_MAX = 100.0


def finite(x: float | None, default: float = 0.0) -> float:
    """Return x as a float, or default for None, NaN or infinity."""
    if x is None:
        return default
    try:
        value = float(x)
    except (TypeError, ValueError):
        return default
    return value if math.isfinite(value) else default


def safe_ratio(numerator: float, denominator: float, fallback: float) -> float:
    """numerator / denominator, or fallback when the denominator is ~0."""
    num = finite(numerator, math.nan)
    den = finite(denominator, math.nan)
    if math.isnan(num) or math.isnan(den) or abs(den) < EPSILON:
        return fallback
    return finite(num / den, fallback)


def clamp(x: float, lo: float = SCORE_MIN, hi: float = SCORE_MAX) -> float:
    """Bound x to [lo, hi]; non-finite input maps to the midpoint."""
    value = finite(x, (lo + hi) / 2)
    return max(lo, min(hi, value))


def ratio_to_pct(ratio: float) -> float:
    """Convert a ratio (1.0 = parity) into a percentage difference."""
    return (finite(ratio, 1.0) - 1.0) * 100


def age_from_year(built_year: float, now_year: float) -> float:
    """Building age in years; unknown build year counts as new."""
    built = finite(built_year, 0.0)
    if built <= 0:
        return 0.0
    return max(0.0, finite(now_year, built) - built)


def tier_points(value: float, tiers: list[tuple[float, float]], above: bool = True) -> float:
    """Points for the first tier whose threshold value passes.

    With ``above`` the value must exceed the threshold (tiers listed highest
    first); otherwise it must be below it (tiers listed lowest first).
    """
    for threshold, points in tiers:
        if (above and value > threshold) or (not above and value < threshold):
            return points
    return 0.0
