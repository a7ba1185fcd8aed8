"""
Trajectory Pillar (350 pts): where the user is headed.

- Wealth-building rate (175): share of income going into savings,
  retirement, investments, HSA and extra debt principal
- Debt velocity (175): how fast risk-weighted debt is shrinking over three
  months
"""

from typing import Iterable

from .debt_normalizer import debt_type_weight
from .fallbacks import Resolution
from .income import resolve_effective_income
from .models import (
    FactorScore,
    NormalizedDebtEntry,
    Pillar,
    PillarScore,
    ScoreInput,
    SubFactor,
    WealthContribution,
)
from .settings import ScoringSettings, scoring_settings

VELOCITY_MAX = SubFactor.DEBT_VELOCITY.max_score
VELOCITY_NEUTRAL = 88


def calculate_wealth_building_rate(
    contributions: WealthContribution,
    effective_income: Resolution,
    settings: ScoringSettings = scoring_settings,
) -> FactorScore:
    """
    Score the monthly wealth-building rate.

    Algorithm:
        rate = total contributions / effective monthly income
        score = min(175, rate / target_rate x 175)

    Linear up to the target rate (20% by default), so every extra dollar
    counts until the target is reached.

    Args:
        contributions: Monthly contributions by destination
        effective_income: Resolved effective income (always positive)
        settings: Scoring settings (uses defaults if not provided)
    """
    max_score = SubFactor.WEALTH_BUILDING_RATE.max_score
    rate = contributions.total / effective_income.value
    score = round(min(max_score, max(0.0, rate / settings.wealth_target_rate * max_score)))

    rate_pct = f"{rate * 100:.1f}%"
    target_pct = settings.wealth_target_rate * 100
    if rate >= settings.wealth_target_rate:
        detail = f"{rate_pct} wealth building rate - Crushing it!"
    elif rate >= settings.wealth_target_rate * 0.75:
        detail = f"{rate_pct} rate - Strong progress, {target_pct - rate * 100:.0f}% from max"
    elif rate >= settings.wealth_target_rate * 0.5:
        detail = f"{rate_pct} rate - Solid foundation building"
    elif rate >= settings.wealth_target_rate * 0.25:
        detail = f"{rate_pct} rate - Every dollar counts, keep going"
    elif rate > 0:
        detail = f"{rate_pct} rate - Getting started"
    else:
        detail = "No wealth building this month"

    if effective_income.source != "confirmed_income":
        detail += " (estimated income)"

    return FactorScore(SubFactor.WEALTH_BUILDING_RATE, score, detail)


def calculate_weighted_debt(
    debts: Iterable[NormalizedDebtEntry],
    settings: ScoringSettings = scoring_settings,
) -> float:
    """Sum of balances, each multiplied by its type weight (and the collections penalty)."""
    total = 0.0
    for debt in debts:
        weight = debt_type_weight(debt.type)
        if debt.in_collections:
            weight *= settings.collections_penalty
        total += max(0.0, debt.balance) * weight
    return total


def score_debt_change(change_pct: float) -> int:
    """
    Convert a three-month change in weighted debt (percent) to 0-175.

    Bands:
        <= -15%: 175 (rapid paydown, over 5% a month)
        <= -10%: 162
        <= -5%: 144
        -5% to -1%: 88 rising to 144
        -1% to 1%: 88 (stable)
        1% to 5%: 88 falling to 26
        5% to 10%: 26
        > 10%: 0
    """
    if change_pct <= -15:
        return 175
    elif change_pct <= -10:
        return 162
    elif change_pct <= -5:
        return 144
    elif change_pct < -1:
        return round(VELOCITY_NEUTRAL + (abs(change_pct) - 1) * 14)
    elif change_pct <= 1:
        return VELOCITY_NEUTRAL
    elif change_pct <= 5:
        return round(VELOCITY_NEUTRAL - (change_pct - 1) * 15.5)
    elif change_pct <= 10:
        return 26
    else:
        return 0


def calculate_debt_velocity(
    current_debts: Iterable[NormalizedDebtEntry],
    debts_three_months_ago: Iterable[NormalizedDebtEntry],
    has_confirmed_no_debt: bool = False,
    settings: ScoringSettings = scoring_settings,
) -> FactorScore:
    """
    Score how fast risk-weighted debt is shrinking.

    Business Rationale:
        Paying down a payday loan or a card balance matters far more than
        paying down a mortgage, so balances are weighted by debt type before
        comparing. A paid-in-full card that actually carries a balance has
        already been reclassified as a credit card by the normalizer, so it
        carries the full credit-card weight here.

    Edge Cases:
        - No debts recorded and not confirmed debt-free: neutral score
        - No weighted debt now or before: full score
        - Weighted debt from zero: treated as +100%
    """
    current_debts = list(current_debts)
    debts_three_months_ago = list(debts_three_months_ago)

    if not current_debts and not debts_three_months_ago:
        if has_confirmed_no_debt:
            return FactorScore(SubFactor.DEBT_VELOCITY, VELOCITY_MAX, "Debt-free!")
        return FactorScore(
            SubFactor.DEBT_VELOCITY,
            VELOCITY_NEUTRAL,
            "No debts recorded - confirm you're debt-free or add your debts",
        )

    current_weighted = calculate_weighted_debt(current_debts, settings)
    previous_weighted = calculate_weighted_debt(debts_three_months_ago, settings)

    if current_weighted == 0 and previous_weighted == 0:
        return FactorScore(SubFactor.DEBT_VELOCITY, VELOCITY_MAX, "No costly debt balances")

    if current_weighted == 0:
        return FactorScore(SubFactor.DEBT_VELOCITY, VELOCITY_MAX, "You paid off all your debt!")

    if previous_weighted > 0:
        change_pct = (current_weighted - previous_weighted) / previous_weighted * 100
    else:
        change_pct = 100.0

    score = max(0, min(VELOCITY_MAX, score_debt_change(change_pct)))

    if change_pct <= -15:
        detail = f"Weighted debt down {abs(change_pct):.0f}% - Excellent momentum!"
    elif change_pct <= -5:
        detail = f"Weighted debt down {abs(change_pct):.0f}% - Strong progress"
    elif change_pct < -1:
        detail = f"Weighted debt down {abs(change_pct):.1f}% - Moving in the right direction"
    elif change_pct <= 1:
        detail = "Debt stable - Can you accelerate payoff?"
    elif change_pct <= 5:
        detail = f"Weighted debt up {change_pct:.1f}% - Time to course correct"
    elif change_pct <= 10:
        detail = f"Weighted debt up {change_pct:.0f}% - Concerning trend"
    else:
        detail = f"Weighted debt up {change_pct:.0f}% - Urgent: review spending"

    return FactorScore(SubFactor.DEBT_VELOCITY, score, detail)


def calculate_trajectory(
    score_input: ScoreInput,
    settings: ScoringSettings = scoring_settings,
) -> PillarScore:
    """Calculate the Trajectory pillar from a score input."""
    effective_income = resolve_effective_income(score_input, settings)
    return PillarScore(
        Pillar.TRAJECTORY,
        (
            calculate_wealth_building_rate(
                score_input.wealth_contributions,
                effective_income,
                settings,
            ),
            calculate_debt_velocity(
                score_input.current_debts,
                score_input.debts_three_months_ago,
                score_input.has_confirmed_no_debt,
                settings,
            ),
        ),
    )
