"""
Position Pillar (300 pts): where the user stands today.

- Emergency buffer (150): liquid savings in months of expenses, against a
  target that depends on how exposed the household's income is
- Debt-to-income (150): monthly debt payments against effective income
"""

from typing import Iterable, Optional

from .fallbacks import Resolution
from .income import resolve_effective_income
from .models import (
    FactorScore,
    HouseholdType,
    NormalizedDebtEntry,
    Pillar,
    PillarScore,
    ScoreInput,
    SubFactor,
)
from .settings import ScoringSettings, scoring_settings

BUFFER_MAX = SubFactor.EMERGENCY_BUFFER.max_score
DTI_MAX = SubFactor.DEBT_TO_INCOME.max_score


def calculate_emergency_buffer(
    liquid_savings: float,
    monthly_expenses: float,
    household_type: Optional[HouseholdType] = None,
    settings: ScoringSettings = scoring_settings,
) -> FactorScore:
    """
    Score the emergency buffer.

    Algorithm:
        months_covered = liquid_savings / monthly_expenses
        score = min(150, months_covered / target_months x 150)

    The target depends on the household: two incomes rarely stop at once, so
    dual-income households need fewer months than single-income or
    self-employed ones. Unknown household type uses the default target.

    Edge Cases:
        - No expenses tracked: full score if any savings exist, else 0
        - Negative liquid balance (overdrawn): 0
    """
    target = settings.emergency_target_months(household_type)

    if monthly_expenses <= 0:
        if liquid_savings > 0:
            return FactorScore(SubFactor.EMERGENCY_BUFFER, BUFFER_MAX, "Great savings!")
        return FactorScore(SubFactor.EMERGENCY_BUFFER, 0, "No expenses tracked")

    months_covered = max(0.0, liquid_savings) / monthly_expenses
    score = round(min(BUFFER_MAX, months_covered / target * BUFFER_MAX))

    if months_covered >= target * 1.5:
        detail = f"{months_covered:.1f} months covered - Fortress mode!"
    elif months_covered >= target:
        detail = f"{months_covered:.1f} months covered - Strong safety net"
    elif months_covered >= target * 0.75:
        detail = f"{months_covered:.1f} months - Solid, keep building to {target:g}"
    elif months_covered >= 1:
        detail = f"{months_covered:.1f} months - Good start, target {target:g} months"
    elif months_covered > 0:
        detail = f"{round(months_covered * 30)} days covered - Building your safety net"
    else:
        detail = "No emergency buffer - start with a $500 goal"

    return FactorScore(SubFactor.EMERGENCY_BUFFER, score, detail)


def calculate_debt_to_income(
    current_debts: Iterable[NormalizedDebtEntry],
    effective_income: Resolution,
    has_confirmed_no_debt: bool = False,
    settings: ScoringSettings = scoring_settings,
) -> FactorScore:
    """
    Score debt-to-income.

    Algorithm:
        dti = total monthly debt payments / effective monthly income x 100
        score = max(0, 150 x (1 - dti / dti_zero_score_pct))

    Effective income is never zero (see resolve_effective_income), so there
    is no divide-by-zero path.

    Edge Cases:
        - No debts recorded and not confirmed debt-free: neutral 75
        - Debts on file but all balances paid off: full score
    """
    current_debts = list(current_debts)

    if not current_debts:
        if has_confirmed_no_debt:
            return FactorScore(SubFactor.DEBT_TO_INCOME, DTI_MAX, "No debt! Perfect score")
        return FactorScore(
            SubFactor.DEBT_TO_INCOME,
            DTI_MAX // 2,
            "No debts recorded - confirm you're debt-free or add your debts",
        )

    open_debts = [d for d in current_debts if d.balance > 0]
    if not open_debts:
        return FactorScore(SubFactor.DEBT_TO_INCOME, DTI_MAX, "No outstanding balances")

    monthly_payments = sum(max(0.0, d.monthly_payment) for d in open_debts)
    dti = monthly_payments / effective_income.value * 100
    score = round(max(0.0, DTI_MAX * (1 - dti / settings.dti_zero_score_pct)))

    if dti <= 10:
        detail = f"{dti:.0f}% DTI - Very healthy"
    elif dti <= 20:
        detail = f"{dti:.0f}% DTI - Good standing"
    elif dti <= 30:
        detail = f"{dti:.0f}% DTI - Manageable"
    elif dti <= 40:
        detail = f"{dti:.0f}% DTI - Getting heavy"
    elif dti <= 50:
        detail = f"{dti:.0f}% DTI - Debt is straining income"
    else:
        detail = f"{dti:.0f}% DTI - Debt burden is critical"

    if effective_income.source != "confirmed_income":
        detail += " (estimated income)"

    return FactorScore(SubFactor.DEBT_TO_INCOME, min(DTI_MAX, score), detail)


def calculate_position(
    score_input: ScoreInput,
    settings: ScoringSettings = scoring_settings,
) -> PillarScore:
    """Calculate the Position pillar from a score input."""
    effective_income = resolve_effective_income(score_input, settings)
    return PillarScore(
        Pillar.POSITION,
        (
            calculate_emergency_buffer(
                score_input.liquid_savings,
                score_input.monthly_expenses,
                score_input.household_type,
                settings,
            ),
            calculate_debt_to_income(
                score_input.current_debts,
                effective_income,
                score_input.has_confirmed_no_debt,
                settings,
            ),
        ),
    )
