"""
Behavior Pillar (350 pts): how the user handles money.

- Payment consistency (200): bills paid on time, with late payments weighted
  by severity and faded out as they age
- Budget discipline (150): categories kept within budget and how far over the
  rest went, capped when budgets look inflated
"""

import math
from dataclasses import replace
from typing import Optional

from .models import FactorScore, Pillar, PillarScore, ScoreInput, SubFactor
from .settings import ScoringSettings, scoring_settings

PAYMENT_MAX = SubFactor.PAYMENT_CONSISTENCY.max_score
BUDGET_MAX = SubFactor.BUDGET_DISCIPLINE.max_score
ADHERENCE_POINTS = 90
SEVERITY_POINTS = 60


def decay_factor(months_ago: int, settings: ScoringSettings = scoring_settings) -> float:
    """
    Weight remaining on a late payment after months_ago months.

    Exponential decay with the configured half-life, dropping to zero past the
    lookback window. Never increases as months_ago grows.
    """
    if months_ago > settings.late_payment_lookback_months:
        return 0.0
    return 0.5 ** (max(0, months_ago) / settings.late_payment_half_life_months)


def calculate_late_payment_penalty(
    score_input: ScoreInput,
    settings: ScoringSettings = scoring_settings,
) -> float:
    """
    Total penalty from late payments.

    With a late-payment history, each event contributes its tier weight times
    its decay factor. Without one, per-tier counts contribute their full tier
    weight (no recency information to decay on).
    """
    if score_input.late_payment_history is not None:
        return sum(
            settings.severity_weight(event.severity_tier) * decay_factor(event.months_ago, settings)
            for event in score_input.late_payment_history
        )
    return sum(
        settings.severity_weight(tier) * max(0, count)
        for tier, count in score_input.late_payment_counts.items()
    )


def calculate_payment_consistency(
    score_input: ScoreInput,
    settings: ScoringSettings = scoring_settings,
) -> FactorScore:
    """
    Score bill-payment consistency.

    Algorithm:
        score = 200 x on_time / (on_time + penalty)

    Every late payment adds its (decayed) severity weight to the denominator,
    so more lateness or more severe lateness can only lower the score, and a
    recent late payment costs more than an old one of the same tier.

    Edge Cases:
        - No bills tracked: neutral 100. A perfect score has to be earned.
        - Only late payments: 0
    """
    on_time = max(0, score_input.bills_paid_on_time)
    total_bills = score_input.total_bills

    if total_bills == 0:
        return FactorScore(
            SubFactor.PAYMENT_CONSISTENCY,
            PAYMENT_MAX // 2,
            "No bills tracked yet - add bills to build your score",
        )

    penalty = calculate_late_payment_penalty(score_input, settings)
    denominator = on_time + penalty
    if denominator <= 0:
        # Only long-forgiven late payments on record
        return FactorScore(
            SubFactor.PAYMENT_CONSISTENCY,
            PAYMENT_MAX // 2,
            "No recent bill history - keep tracking your bills",
        )

    effective_rate = on_time / denominator
    score = max(0, min(PAYMENT_MAX, round(effective_rate * PAYMENT_MAX)))

    on_time_rate = on_time / total_bills * 100
    if on_time == total_bills:
        detail = f"Perfect! {total_bills}/{total_bills} bills on time"
    elif effective_rate >= 0.95:
        detail = f"{on_time_rate:.0f}% on-time - Excellent track record"
    elif effective_rate >= 0.90:
        detail = f"{on_time_rate:.0f}% on-time - Good, room to improve"
    elif effective_rate >= 0.80:
        detail = f"{on_time_rate:.0f}% on-time - Set up autopay for consistency"
    else:
        detail = f"{on_time_rate:.0f}% on-time - Priority: automate your payments"

    return FactorScore(SubFactor.PAYMENT_CONSISTENCY, score, detail)


def score_overspend_severity(average_overspend_pct: float) -> int:
    """Convert the average overspend on overspent categories to 0-60."""
    if average_overspend_pct <= 10:
        return 48
    elif average_overspend_pct <= 25:
        return 35
    elif average_overspend_pct <= 50:
        return 20
    elif average_overspend_pct <= 100:
        return 8
    else:
        return 0


def calculate_budget_discipline(
    budgets_on_track: int,
    total_budgets: int,
    average_overspend_pct: float,
    budget_to_spending_ratio: Optional[float] = None,
    settings: ScoringSettings = scoring_settings,
) -> FactorScore:
    """
    Score budget discipline.

    Algorithm:
        Adherence (90 pts): share of budgets that stayed within limit
        Severity (60 pts): how far over budget the overspent categories went

    Anti-gaming:
        When total budgeted is more than anti_gaming_ratio_threshold times
        actual trailing spend in those categories, the score is capped at
        anti_gaming_cap_pct of the max. Staying under a budget set at twice
        what you spend shows nothing.
    """
    if total_budgets <= 0:
        return FactorScore(
            SubFactor.BUDGET_DISCIPLINE,
            BUDGET_MAX // 2,
            "No budgets set - create budgets to track this",
        )

    on_track = max(0, min(budgets_on_track, total_budgets))
    adherence = on_track / total_budgets
    adherence_score = round(adherence * ADHERENCE_POINTS)

    if on_track == total_budgets:
        severity_score = SEVERITY_POINTS
    else:
        severity_score = score_overspend_severity(average_overspend_pct)

    score = min(BUDGET_MAX, adherence_score + severity_score)

    if on_track == total_budgets:
        detail = f"All {total_budgets} budgets on track!"
    elif adherence >= 0.8:
        detail = f"{on_track}/{total_budgets} on track - Close to perfect"
    elif adherence >= 0.6:
        detail = f"{on_track}/{total_budgets} on track - Watch the overspending"
    else:
        detail = f"{on_track}/{total_budgets} on track - Budget needs attention"

    if (
        budget_to_spending_ratio is not None
        and budget_to_spending_ratio > settings.anti_gaming_ratio_threshold
    ):
        cap = round(BUDGET_MAX * settings.anti_gaming_cap_pct)
        if score > cap:
            score = cap
            if math.isinf(budget_to_spending_ratio):
                detail += " (capped: nothing spent in the budgeted categories)"
            else:
                detail += (
                    f" (capped: budgets are {budget_to_spending_ratio:.1f}x "
                    "your actual spending)"
                )

    return FactorScore(SubFactor.BUDGET_DISCIPLINE, score, detail)


def behavior_confidence(data_months: Optional[int], settings: ScoringSettings = scoring_settings) -> float:
    """
    Confidence in behavior signals given months of history.

    One perfect month is not proven discipline: 0 months = 50%, then +15% per
    month, 100% from full_confidence_months on. Unknown history = 100%.
    """
    if data_months is None or data_months >= settings.full_confidence_months:
        return 1.0
    if data_months <= 0:
        return 0.5
    return min(1.0, 0.5 + data_months * 0.15)


def apply_confidence(factor: FactorScore, confidence: float) -> FactorScore:
    """Pull a factor score toward its midpoint by (1 - confidence)."""
    if confidence >= 1.0:
        return factor
    midpoint = factor.max_score / 2
    score = round(midpoint + (factor.score - midpoint) * confidence)
    return replace(
        factor,
        score=max(0, min(factor.max_score, score)),
        detail=f"{factor.detail} ({confidence * 100:.0f}% confidence - builds over time)",
    )


def calculate_behavior(
    score_input: ScoreInput,
    settings: ScoringSettings = scoring_settings,
) -> PillarScore:
    """Calculate the Behavior pillar from a score input."""
    confidence = behavior_confidence(score_input.data_months, settings)

    payment = calculate_payment_consistency(score_input, settings)
    budget = calculate_budget_discipline(
        score_input.budgets_on_track,
        score_input.total_budgets,
        score_input.average_overspend_pct,
        score_input.budget_to_spending_ratio,
        settings,
    )

    return PillarScore(
        Pillar.BEHAVIOR,
        (apply_confidence(payment, confidence), apply_confidence(budget, confidence)),
    )
