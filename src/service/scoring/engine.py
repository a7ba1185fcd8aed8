"""
Financial Health Score engine.

This module orchestrates a complete scoring run:
1. Score the Trajectory, Behavior and Position pillars
2. Flag missing optional inputs
3. Compose the total, level and tips

This is the main entry point for the scoring module. It is a pure function of
its input: it reads no clock, database or global state other than settings.
"""

from typing import Optional

from .behavior import calculate_behavior
from .composer import compose_score
from .models import DataCompleteness, ScoreInput, ScoreResult
from .position import calculate_position
from .settings import ScoringSettings, scoring_settings
from .trajectory import calculate_trajectory


def assess_data_completeness(score_input: ScoreInput) -> DataCompleteness:
    """Flag which optional inputs were absent."""
    return DataCompleteness(
        no_debts=not score_input.current_debts and not score_input.has_confirmed_no_debt,
        no_budgets=score_input.total_budgets <= 0,
        no_savings_goals=not score_input.has_savings_goals,
        no_bill_history=score_input.total_bills == 0,
        no_household_type=score_input.household_type is None,
    )


def calculate_financial_health_score(
    score_input: ScoreInput,
    previous_score: Optional[int] = None,
    settings: ScoringSettings = scoring_settings,
) -> ScoreResult:
    """
    Calculate the Financial Health Score for one snapshot.

    Args:
        score_input: Fully assembled scoring snapshot
        previous_score: Total from the user's most recent earlier score, if any
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        ScoreResult with the 0-1000 total, pillar and sub-factor scores, tips
        and data-completeness flags
    """
    return compose_score(
        trajectory=calculate_trajectory(score_input, settings),
        behavior=calculate_behavior(score_input, settings),
        position=calculate_position(score_input, settings),
        data_completeness=assess_data_completeness(score_input),
        previous_score=previous_score,
        settings=settings,
    )
