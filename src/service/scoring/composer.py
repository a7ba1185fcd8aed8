"""
Score Composition for the Financial Health Score.

Combines the three pillars into the 0-1000 total, derives the level and its
title, ranks improvement tips, and compares a result with an earlier one.
"""

from typing import Iterable, List, Mapping, Optional, Tuple

from .models import (
    MAX_TOTAL_SCORE,
    DataCompleteness,
    FactorScore,
    PillarScore,
    ScoreChange,
    ScoreResult,
    SubFactor,
)
from .settings import ScoringSettings, scoring_settings

# (minimum total, level, title), highest first
LEVELS: List[Tuple[int, int, str]] = [
    (900, 5, "Financial Freedom"),
    (750, 4, "Wealth Builder"),
    (600, 3, "Solid Ground"),
    (400, 2, "Foundation"),
    (200, 1, "Getting Started"),
    (0, 0, "Beginning Journey"),
]

TIPS: Mapping[SubFactor, str] = {
    SubFactor.WEALTH_BUILDING_RATE: (
        "Increase your savings rate - even 1% more makes a difference over time"
    ),
    SubFactor.DEBT_VELOCITY: (
        "Focus extra payments on highest-interest debt first (avalanche method)"
    ),
    SubFactor.PAYMENT_CONSISTENCY: (
        "Set up autopay for all recurring bills - never miss a payment"
    ),
    SubFactor.BUDGET_DISCIPLINE: (
        "Review overspent categories - can you trim or reallocate from underspent ones?"
    ),
    SubFactor.EMERGENCY_BUFFER: (
        "Build your emergency fund - start with $1,000, then work toward your "
        "months-of-expenses target"
    ),
    SubFactor.DEBT_TO_INCOME: (
        "Reduce your debt burden - consider consolidating high-interest debts"
    ),
}

ALL_GOOD_TIP = "You're doing amazing! Keep up the great work"


def get_score_level(total: int) -> Tuple[int, str]:
    """Map a total score to (level, title)."""
    for minimum, level, title in LEVELS:
        if total >= minimum:
            return level, title
    return LEVELS[-1][1], LEVELS[-1][2]


def generate_tips(
    factors: Iterable[FactorScore],
    settings: ScoringSettings = scoring_settings,
) -> List[str]:
    """
    Build the ranked list of improvement tips.

    Every sub-factor below tip_threshold_pct gets its tip. Tips are ordered by
    opportunity: the sub-factor with the most points left on the table comes
    first (ties broken by lower percentage).
    """
    weak = [f for f in factors if f.percentage < settings.tip_threshold_pct]
    weak.sort(key=lambda f: (-(f.max_score - f.score), f.percentage))

    tips = [TIPS[f.factor] for f in weak]
    return tips or [ALL_GOOD_TIP]


def compose_score(
    trajectory: PillarScore,
    behavior: PillarScore,
    position: PillarScore,
    data_completeness: DataCompleteness,
    previous_score: Optional[int] = None,
    settings: ScoringSettings = scoring_settings,
) -> ScoreResult:
    """
    Compose the final score from the three pillars.

    The total is clamped to [0, 1000].
    """
    total = max(0, min(MAX_TOTAL_SCORE, trajectory.score + behavior.score + position.score))
    level, title = get_score_level(total)
    factors = [f for pillar in (trajectory, behavior, position) for f in pillar.factors]

    return ScoreResult(
        total=total,
        level=level,
        level_title=title,
        trajectory=trajectory,
        behavior=behavior,
        position=position,
        tips=generate_tips(factors, settings),
        data_completeness=data_completeness,
        previous_score=previous_score,
    )


def calculate_score_change(
    current: ScoreResult,
    previous_total: int,
    previous_factors: Mapping[SubFactor, int],
) -> ScoreChange:
    """
    Compare a result with an earlier score.

    Args:
        current: The new result
        previous_total: Total of the earlier score
        previous_factors: Sub-factor scores of the earlier score

    Returns:
        ScoreChange with the total delta and the labels of sub-factors that
        went up or down
    """
    improved: List[str] = []
    declined: List[str] = []

    for factor, current_factor in current.factors.items():
        previous = previous_factors.get(factor)
        if previous is None:
            continue
        if current_factor.score > previous:
            improved.append(factor.label)
        elif current_factor.score < previous:
            declined.append(factor.label)

    return ScoreChange(
        change=current.total - previous_total,
        improved=improved,
        declined=declined,
    )


def explain_score(result: ScoreResult) -> str:
    """
    Generate a human-readable explanation of a score.

    Used for logging, debugging and support tooling.
    """
    lines = [f"Financial Health Score: {result.total}/{MAX_TOTAL_SCORE}"]
    lines.append(f"Level {result.level}: {result.level_title}")
    if result.previous_score is not None:
        delta = result.total - result.previous_score
        lines.append(f"Change since last score: {delta:+d}")
    lines.append("")

    for pillar in result.pillars:
        lines.append(f"{pillar.pillar.value.title()}: {pillar.score}/{pillar.max_score}")
        for factor in pillar.factors:
            lines.append(
                f"  - {factor.factor.label}: {factor.score}/{factor.max_score} ({factor.detail})"
            )

    lines.append("")
    lines.append("Tips:")
    for tip in result.tips:
        lines.append(f"  - {tip}")

    return "\n".join(lines)
