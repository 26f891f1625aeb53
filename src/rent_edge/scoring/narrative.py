"""Rule tables turning factor state into summaries, recommendations and tips."""

from __future__ import annotations

from ..models import LeverageParams, NarrativeCopy, ScoreFactor


def dominant_factor(factors: dict[str, ScoreFactor]) -> tuple[str, ScoreFactor]:
    """Factor deviating most from neutral 50; ties go to the earlier (heavier) factor."""
    best_key = next(iter(factors))
    best_dev = -1.0
    for key, factor in factors.items():
        dev = abs(factor.value - 50)
        if dev > best_dev:
            best_key, best_dev = key, dev
    return best_key, factors[best_key]


def deal_summary(
    factors: dict[str, ScoreFactor],
    copy: NarrativeCopy,
    min_deviation: float,
) -> str:
    key, factor = dominant_factor(factors)
    if abs(factor.value - 50) <= min_deviation:
        return copy.balanced_summary
    texts = copy.deal_summaries.get(key)
    if not texts:
        return copy.balanced_summary
    return texts["high"] if factor.value > 50 else texts["low"]


def deal_recommendation(score: float, copy: NarrativeCopy) -> str:
    for threshold, text in copy.deal_recommendations:
        if score >= threshold:
            return text
    return copy.deal_recommendations[-1][1]


def negotiation_tips(
    factors: dict[str, ScoreFactor],
    params: LeverageParams,
    copy: NarrativeCopy,
) -> list[str]:
    """Canned tips for high-leverage factors, most impactful first."""
    triggered = [
        (key, factor)
        for key, factor in factors.items()
        if factor.value >= params.tip_threshold and copy.negotiation_tips.get(key)
    ]
    # sorted() is stable, so equal contributions keep factor order
    triggered = sorted(triggered, key=lambda kf: -kf[1].contribution)
    tips = [copy.negotiation_tips[key] for key, _ in triggered[: max(0, params.max_tips)]]
    if not tips and copy.fallback_tip:
        tips.append(copy.fallback_tip)
    return tips


def best_timing(seasonality: ScoreFactor, params: LeverageParams, copy: NarrativeCopy) -> str:
    if seasonality.value >= params.timing_strong:
        return copy.best_timing.get("strong", "")
    if seasonality.value <= params.timing_weak:
        return copy.best_timing.get("weak", "")
    return copy.best_timing.get("moderate", "")


def deal_label(score: float) -> str:
    """Short badge label for a Deal Score."""
    if score >= 80:
        return "Great Deal"
    if score >= 65:
        return "Good Deal"
    if score >= 50:
        return "Fair Deal"
    return "Below Avg"


def leverage_label(score: float) -> str:
    """Short badge label for a Leverage Score."""
    if score >= 70:
        return "Strong"
    if score >= 50:
        return "Moderate"
    if score >= 30:
        return "Limited"
    return "Low"
