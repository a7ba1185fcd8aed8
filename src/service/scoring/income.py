"""
Income resolution chains.

Two different questions are answered here:
- What is the user's monthly income? (resolved by the caller from stored data)
- What income should ratios be computed against? (resolved by the engine,
  never zero, so no ratio can blow up)
"""

from .fallbacks import FallbackStep, Resolution, is_positive, resolve_fallback
from .models import ScoreInput
from .settings import ScoringSettings, scoring_settings


def resolve_monthly_income(
    income_this_month: float,
    trailing_three_month_income: float,
    profile_income: float,
) -> Resolution:
    """
    Resolve monthly income from stored data.

    Fallback chain:
        1. Income transactions this calendar month
        2. Average monthly income transactions over the trailing three months
        3. Income the user entered on their profile

    A resolution with source "default" (value 0) means no income is known.
    """
    chain = [
        FallbackStep(
            "this_month_transactions",
            lambda: is_positive(income_this_month),
            lambda: income_this_month,
        ),
        FallbackStep(
            "trailing_average",
            lambda: is_positive(trailing_three_month_income),
            lambda: trailing_three_month_income / 3,
        ),
        FallbackStep(
            "profile",
            lambda: is_positive(profile_income),
            lambda: profile_income,
        ),
    ]
    return resolve_fallback(chain)


def resolve_effective_income(
    score_input: ScoreInput,
    settings: ScoringSettings = scoring_settings,
) -> Resolution:
    """
    Resolve the income used as a denominator for wealth-building and DTI.

    Fallback chain:
        1. Confirmed monthly income
        2. Monthly expenses x expense_income_multiplier (people roughly spend
           what they earn)
        3. Fixed income floor

    The result is always strictly positive.
    """
    chain = [
        FallbackStep(
            "confirmed_income",
            lambda: score_input.has_confirmed_income and is_positive(score_input.monthly_income),
            lambda: score_input.monthly_income,
        ),
        FallbackStep(
            "expense_estimate",
            lambda: is_positive(score_input.monthly_expenses),
            lambda: score_input.monthly_expenses * settings.expense_income_multiplier,
        ),
        FallbackStep(
            "income_floor",
            lambda: True,
            lambda: settings.income_floor,
        ),
    ]
    return resolve_fallback(chain, default=settings.income_floor)
