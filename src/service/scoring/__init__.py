"""
Financial Health Score Module
"""

from .models import (
    DebtType,
    HouseholdType,
    SeverityTier,
    Pillar,
    SubFactor,
    DebtRecord,
    DebtPayment,
    BillPayment,
    Budget,
    Transaction,
    NormalizedDebtEntry,
    LatePaymentEvent,
    WealthContribution,
    BehaviorHistory,
    ScoreInput,
    FactorScore,
    PillarScore,
    DataCompleteness,
    ScoreResult,
    ScoreChange,
)
from .settings import ScoringSettings, scoring_settings
from .fallbacks import FallbackStep, Resolution, resolve_fallback
from .debt_normalizer import normalize, normalize_prior, normalize_all
from .behavior_history import aggregate, build_late_payment_history
from .income import resolve_monthly_income, resolve_effective_income
from .trajectory import calculate_trajectory, calculate_wealth_building_rate, calculate_debt_velocity
from .behavior import calculate_behavior, calculate_payment_consistency, calculate_budget_discipline
from .position import calculate_position, calculate_emergency_buffer, calculate_debt_to_income
from .composer import (
    compose_score,
    generate_tips,
    get_score_level,
    calculate_score_change,
    explain_score,
)
from .engine import assess_data_completeness, calculate_financial_health_score

__all__ = [
    # Settings
    "ScoringSettings",
    "scoring_settings",
    # Models
    "DebtType",
    "HouseholdType",
    "SeverityTier",
    "Pillar",
    "SubFactor",
    "DebtRecord",
    "DebtPayment",
    "BillPayment",
    "Budget",
    "Transaction",
    "NormalizedDebtEntry",
    "LatePaymentEvent",
    "WealthContribution",
    "BehaviorHistory",
    "ScoreInput",
    "FactorScore",
    "PillarScore",
    "DataCompleteness",
    "ScoreResult",
    "ScoreChange",
    # Fallbacks
    "FallbackStep",
    "Resolution",
    "resolve_fallback",
    # Normalization
    "normalize",
    "normalize_prior",
    "normalize_all",
    # Behavioral History
    "aggregate",
    "build_late_payment_history",
    # Income
    "resolve_monthly_income",
    "resolve_effective_income",
    # Pillars
    "calculate_trajectory",
    "calculate_wealth_building_rate",
    "calculate_debt_velocity",
    "calculate_behavior",
    "calculate_payment_consistency",
    "calculate_budget_discipline",
    "calculate_position",
    "calculate_emergency_buffer",
    "calculate_debt_to_income",
    # Composition
    "compose_score",
    "generate_tips",
    "get_score_level",
    "calculate_score_change",
    "explain_score",
    # Engine
    "assess_data_completeness",
    "calculate_financial_health_score",
]
