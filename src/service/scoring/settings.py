"""
Scoring Settings for the Financial Health Score engine.

This module contains every tunable policy value used by the pillar
calculators. They can be adjusted via environment variables to retune the
score without touching the calculation code.

Environment variables use the SCORING_ prefix:
    SCORING_ANTI_GAMING_RATIO_THRESHOLD=1.5
    SCORING_LATE_PAYMENT_HALF_LIFE_MONTHS=12
    SCORING_INCOME_FLOOR=1250

Usage:
    from src.service.scoring.settings import scoring_settings

    # Use default settings (loaded from env)
    threshold = scoring_settings.anti_gaming_ratio_threshold

    # Or create custom settings for testing
    custom = ScoringSettings(late_payment_half_life_months=6)
"""

import json
from functools import cached_property, lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import HouseholdType, SeverityTier


class ScoringSettings(BaseSettings):
    """
    Configurable policy values for the Financial Health Score.

    All settings can be overridden via environment variables with SCORING_ prefix.
    All monetary values are monthly dollar amounts.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Wealth Building ===
    wealth_target_rate: float = Field(
        default=0.20,
        gt=0.0,
        le=1.0,
        description="Contribution rate (share of income) that earns full wealth-building points",
    )

    # === Effective Income ===
    expense_income_multiplier: float = Field(
        default=1.1,
        gt=0.0,
        description="Unconfirmed income is estimated as monthly expenses times this factor",
    )
    income_floor: float = Field(
        default=1250.0,
        gt=0.0,
        description="Effective monthly income used when neither income nor expenses are known",
    )

    # === Late Payment Decay ===
    late_payment_half_life_months: float = Field(
        default=12.0,
        gt=0.0,
        description="Months after which a late payment carries half its original weight",
    )
    late_payment_lookback_months: int = Field(
        default=84,
        ge=1,
        description="Late payments older than this no longer count at all",
    )
    severity_weights_json: str = Field(
        default="[0.5, 1.0, 1.5, 2.0, 2.5, 3.0]",
        description=(
            "Penalty per late payment as JSON array, ordered "
            "[1-30, 31-60, 61-90, 91-120, 120+, missed]"
        ),
    )

    # === Budget Discipline ===
    anti_gaming_ratio_threshold: float = Field(
        default=1.5,
        gt=1.0,
        description="Budgeted/actual-spend ratio above which budgets are treated as inflated",
    )
    anti_gaming_cap_pct: float = Field(
        default=0.60,
        ge=0.0,
        le=1.0,
        description="Share of the budget-discipline max allowed when budgets look inflated",
    )

    # === Emergency Buffer Targets (months of expenses) ===
    emergency_months_dual_income: float = Field(default=3.0, gt=0.0)
    emergency_months_single_income: float = Field(default=4.5, gt=0.0)
    emergency_months_self_employed: float = Field(default=6.0, gt=0.0)
    emergency_months_default: float = Field(
        default=4.0,
        gt=0.0,
        description="Target used when the household type is unknown",
    )

    # === Debt ===
    collections_penalty: float = Field(
        default=1.5,
        ge=1.0,
        description="Multiplier applied on top of the type weight for debts in collections",
    )
    dti_zero_score_pct: float = Field(
        default=60.0,
        gt=0.0,
        description="Debt-to-income percentage at which the DTI sub-factor reaches zero",
    )

    # === Cold Start ===
    full_confidence_months: int = Field(
        default=4,
        ge=1,
        description="Months of history after which behavior factors count at full weight",
    )

    # === Tips ===
    tip_threshold_pct: float = Field(
        default=70.0,
        ge=0.0,
        le=100.0,
        description="Sub-factors scoring below this percentage get an improvement tip",
    )

    @field_validator("severity_weights_json")
    @classmethod
    def validate_severity_weights_json(cls, v: str) -> str:
        """Validate that the weights are six non-negative, non-decreasing numbers."""
        try:
            weights = json.loads(v)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}")
        if not isinstance(weights, list) or len(weights) != len(SeverityTier):
            raise ValueError(f"Expected {len(SeverityTier)} severity weights")
        if not all(isinstance(w, (int, float)) and w >= 0 for w in weights):
            raise ValueError("Severity weights must be non-negative numbers")
        if any(later < earlier for earlier, later in zip(weights, weights[1:])):
            raise ValueError("Severity weights must not decrease with severity")
        return v

    @model_validator(mode="after")
    def validate_household_targets(self) -> "ScoringSettings":
        if self.emergency_months_dual_income > min(
            self.emergency_months_single_income,
            self.emergency_months_self_employed,
        ):
            raise ValueError(
                "Dual-income households cannot need a larger buffer than "
                "single-income or self-employed households"
            )
        return self

    @cached_property
    def severity_weights(self) -> List[float]:
        """Penalty weights in SeverityTier order, parsed once per instance."""
        return [float(w) for w in json.loads(self.severity_weights_json)]

    def severity_weight(self, tier: SeverityTier) -> float:
        return self.severity_weights[tier.rank]

    def emergency_target_months(self, household_type: Optional[HouseholdType]) -> float:
        """Months of expenses that earn full emergency-buffer points."""
        targets = {
            HouseholdType.DUAL_INCOME: self.emergency_months_dual_income,
            HouseholdType.SINGLE_INCOME: self.emergency_months_single_income,
            HouseholdType.SELF_EMPLOYED: self.emergency_months_self_employed,
        }
        return targets.get(household_type, self.emergency_months_default)


@lru_cache
def get_scoring_settings() -> ScoringSettings:
    """Get cached scoring settings instance."""
    return ScoringSettings()


scoring_settings = get_scoring_settings()
