"""
Data models for the Financial Health Score.

These models cover the whole scoring pipeline: raw records as stored by the
application, the normalized entries the pillar calculators consume, the
ScoreInput snapshot and the final ScoreResult.

All monetary values are dollars. Monthly figures are per-month rates.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple


class DebtType(str, Enum):
    """Debt categories as stored on a debt record."""
    CREDIT_CARD = "credit_card"          # Revolving balance carried month to month
    CC_PAID_MONTHLY = "cc_paid_monthly"  # Card paid in full every statement
    MORTGAGE = "mortgage"
    HELOC = "heloc"
    AUTO = "auto"
    STUDENT = "student"
    PERSONAL = "personal"
    MEDICAL = "medical"
    BUSINESS = "business"
    PAYDAY = "payday"                    # Payday / title loans
    BNPL = "bnpl"                        # Buy now, pay later
    ZERO_PCT = "zero_pct"                # 0% promotional financing
    SECURED = "secured"                  # Secured by liquid collateral
    OTHER = "other"


class HouseholdType(str, Enum):
    """Income structure of the household, used for the emergency buffer target."""
    DUAL_INCOME = "dual_income"
    SINGLE_INCOME = "single_income"
    SELF_EMPLOYED = "self_employed"


class SeverityTier(str, Enum):
    """How late a bill payment was, ordered from least to most severe."""
    LATE_1_30 = "late_1_30"
    LATE_31_60 = "late_31_60"
    LATE_61_90 = "late_61_90"
    LATE_91_120 = "late_91_120"
    LATE_120_PLUS = "late_120_plus"
    MISSED = "missed"

    @property
    def rank(self) -> int:
        """Position in severity order (0 = least severe)."""
        return list(SeverityTier).index(self)


class Pillar(str, Enum):
    TRAJECTORY = "trajectory"
    BEHAVIOR = "behavior"
    POSITION = "position"

    @property
    def max_score(self) -> int:
        return PILLAR_MAX[self]


class SubFactor(str, Enum):
    """The six scored components, two per pillar."""
    WEALTH_BUILDING_RATE = "wealth_building_rate"
    DEBT_VELOCITY = "debt_velocity"
    PAYMENT_CONSISTENCY = "payment_consistency"
    BUDGET_DISCIPLINE = "budget_discipline"
    EMERGENCY_BUFFER = "emergency_buffer"
    DEBT_TO_INCOME = "debt_to_income"

    @property
    def max_score(self) -> int:
        return FACTOR_MAX[self]

    @property
    def pillar(self) -> Pillar:
        return FACTOR_PILLAR[self]

    @property
    def label(self) -> str:
        return FACTOR_LABELS[self]


PILLAR_MAX: Dict[Pillar, int] = {
    Pillar.TRAJECTORY: 350,
    Pillar.BEHAVIOR: 350,
    Pillar.POSITION: 300,
}

FACTOR_MAX: Dict[SubFactor, int] = {
    SubFactor.WEALTH_BUILDING_RATE: 175,
    SubFactor.DEBT_VELOCITY: 175,
    SubFactor.PAYMENT_CONSISTENCY: 200,
    SubFactor.BUDGET_DISCIPLINE: 150,
    SubFactor.EMERGENCY_BUFFER: 150,
    SubFactor.DEBT_TO_INCOME: 150,
}

FACTOR_PILLAR: Dict[SubFactor, Pillar] = {
    SubFactor.WEALTH_BUILDING_RATE: Pillar.TRAJECTORY,
    SubFactor.DEBT_VELOCITY: Pillar.TRAJECTORY,
    SubFactor.PAYMENT_CONSISTENCY: Pillar.BEHAVIOR,
    SubFactor.BUDGET_DISCIPLINE: Pillar.BEHAVIOR,
    SubFactor.EMERGENCY_BUFFER: Pillar.POSITION,
    SubFactor.DEBT_TO_INCOME: Pillar.POSITION,
}

FACTOR_LABELS: Dict[SubFactor, str] = {
    SubFactor.WEALTH_BUILDING_RATE: "Wealth Building",
    SubFactor.DEBT_VELOCITY: "Debt Progress",
    SubFactor.PAYMENT_CONSISTENCY: "Payment History",
    SubFactor.BUDGET_DISCIPLINE: "Budget Discipline",
    SubFactor.EMERGENCY_BUFFER: "Emergency Fund",
    SubFactor.DEBT_TO_INCOME: "Debt-to-Income",
}

MAX_TOTAL_SCORE = 1000


# =============================================================================
# Raw records (as read from the application's store)
# =============================================================================

@dataclass(frozen=True)
class DebtRecord:
    """
    A stored debt instrument.

    Attributes:
        id: Identifier used to match payments to this debt
        type: Stored debt category
        current_balance: Outstanding balance in dollars (never negative)
        monthly_payment: What the user actually pays each month, if known
        minimum_payment: Required minimum payment, if known
        apr: Annual percentage rate, e.g. 22.0 for 22%
        in_collections: True if the debt has been sent to collections
        origination_term_months: Original loan term, if known
    """
    id: str
    type: DebtType
    current_balance: float
    monthly_payment: Optional[float] = None
    minimum_payment: Optional[float] = None
    apr: float = 0.0
    in_collections: bool = False
    origination_term_months: Optional[int] = None

    def __post_init__(self):
        if self.current_balance < 0:
            raise ValueError("current_balance cannot be negative")


@dataclass(frozen=True)
class DebtPayment:
    """A payment logged against a debt."""
    debt_id: str
    date: date
    amount: float
    is_extra: bool = False  # Paid above the required amount


@dataclass(frozen=True)
class BillPayment:
    """
    A recurring bill occurrence and how it was paid.

    status is one of: on_time, late_1_30, late_31_60, late_61_90,
    late_91_120, late_120_plus, late_61_plus (legacy), missed.
    """
    due_date: date
    status: str


@dataclass(frozen=True)
class Budget:
    """Monthly budget for one spending category."""
    category_id: str
    budgeted: float


@dataclass(frozen=True)
class Transaction:
    """A bank transaction. Positive amounts are inflows, negative are outflows."""
    date: date
    amount: float
    category_id: Optional[str] = None

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.amount < 0


# =============================================================================
# Normalized / derived data
# =============================================================================

@dataclass(frozen=True)
class NormalizedDebtEntry:
    """
    Canonical debt representation used by the pillar calculators.

    monthly_payment is always set; it is estimated from the balance and term
    when the record has no payment figure. type can differ from the stored type
    when a paid-in-full card turns out to carry a balance.
    """
    type: DebtType
    balance: float
    monthly_payment: float
    apr: float = 0.0
    in_collections: bool = False
    reclassified: bool = False


@dataclass(frozen=True)
class LatePaymentEvent:
    """A single late or missed bill payment and how long ago it happened."""
    severity_tier: SeverityTier
    months_ago: int

    def __post_init__(self):
        if self.months_ago < 0:
            raise ValueError("months_ago cannot be negative")


@dataclass(frozen=True)
class WealthContribution:
    """Monthly dollars flowing into net-worth building."""
    cash_savings: float = 0.0
    retirement_401k: float = 0.0
    ira: float = 0.0
    investments: float = 0.0
    hsa: float = 0.0
    extra_debt_payments: float = 0.0

    @property
    def total(self) -> float:
        return sum(
            max(0.0, amount) for amount in (
                self.cash_savings,
                self.retirement_401k,
                self.ira,
                self.investments,
                self.hsa,
                self.extra_debt_payments,
            )
        )


@dataclass(frozen=True)
class BudgetDiscipline:
    """Budget-vs-actual summary for the scoring month."""
    on_track: int = 0
    total: int = 0
    average_overspend_pct: float = 0.0


@dataclass(frozen=True)
class BehaviorHistory:
    """Output of the behavioral history aggregator."""
    bills_paid_on_time: int
    late_payment_counts: Dict[SeverityTier, int]
    late_payment_history: List[LatePaymentEvent]
    budget_discipline: BudgetDiscipline
    budget_to_spending_ratio: Optional[float]

    @property
    def total_bills(self) -> int:
        return self.bills_paid_on_time + sum(self.late_payment_counts.values())


@dataclass(frozen=True)
class ScoreInput:
    """
    Immutable snapshot of everything the engine needs for one scoring run.

    Optional refinements (late_payment_history, budget_to_spending_ratio,
    household_type, data_months) fall back to a neutral baseline when None.
    """
    monthly_income: float = 0.0
    wealth_contributions: WealthContribution = field(default_factory=WealthContribution)
    liquid_savings: float = 0.0
    monthly_expenses: float = 0.0
    current_debts: List[NormalizedDebtEntry] = field(default_factory=list)
    debts_three_months_ago: List[NormalizedDebtEntry] = field(default_factory=list)
    bills_paid_on_time: int = 0
    late_payment_counts: Dict[SeverityTier, int] = field(default_factory=dict)
    budgets_on_track: int = 0
    total_budgets: int = 0
    average_overspend_pct: float = 0.0
    late_payment_history: Optional[List[LatePaymentEvent]] = None
    budget_to_spending_ratio: Optional[float] = None
    household_type: Optional[HouseholdType] = None
    has_confirmed_no_debt: bool = False
    has_confirmed_income: bool = False
    has_savings_goals: bool = False
    data_months: Optional[int] = None

    @property
    def late_bill_count(self) -> int:
        if self.late_payment_counts:
            return sum(max(0, count) for count in self.late_payment_counts.values())
        return len(self.late_payment_history or [])

    @property
    def total_bills(self) -> int:
        return max(0, self.bills_paid_on_time) + self.late_bill_count


# =============================================================================
# Results
# =============================================================================

@dataclass(frozen=True)
class FactorScore:
    """Score for one sub-factor, with a human-readable explanation."""
    factor: SubFactor
    score: int
    detail: str

    @property
    def max_score(self) -> int:
        return self.factor.max_score

    @property
    def percentage(self) -> float:
        """score / max, expressed 0-100."""
        return round(self.score / self.max_score * 100, 1)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "max": self.max_score,
            "percentage": self.percentage,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class PillarScore:
    """A pillar and its two sub-factors."""
    pillar: Pillar
    factors: Tuple[FactorScore, FactorScore]

    @property
    def score(self) -> int:
        return sum(f.score for f in self.factors)

    @property
    def max_score(self) -> int:
        return self.pillar.max_score

    def to_dict(self) -> dict:
        data = {"score": self.score, "max": self.max_score}
        for factor in self.factors:
            data[factor.factor.value] = factor.to_dict()
        return data


@dataclass(frozen=True)
class DataCompleteness:
    """
    Which optional inputs were missing for this run.

    Informational only: used to prompt the user to add data. Never changes
    the score.
    """
    no_debts: bool
    no_budgets: bool
    no_savings_goals: bool
    no_bill_history: bool
    no_household_type: bool

    @property
    def is_complete(self) -> bool:
        return not any(self.to_dict().values())

    def to_dict(self) -> dict:
        return {
            "no_debts": self.no_debts,
            "no_budgets": self.no_budgets,
            "no_savings_goals": self.no_savings_goals,
            "no_bill_history": self.no_bill_history,
            "no_household_type": self.no_household_type,
        }


@dataclass(frozen=True)
class ScoreResult:
    """
    The composed Financial Health Score.

    Attributes:
        total: Composite score from 0-1000
        level: Discrete level 0-5 derived from total
        level_title: Display title for the level
        trajectory / behavior / position: Pillar scores with their sub-factors
        tips: Improvement tips, highest-opportunity first
        data_completeness: Flags for missing optional inputs
        previous_score: Most recent prior total for this user, if any
    """
    total: int
    level: int
    level_title: str
    trajectory: PillarScore
    behavior: PillarScore
    position: PillarScore
    tips: List[str]
    data_completeness: DataCompleteness
    previous_score: Optional[int] = None

    @property
    def pillars(self) -> Tuple[PillarScore, PillarScore, PillarScore]:
        return (self.trajectory, self.behavior, self.position)

    @property
    def factors(self) -> Dict[SubFactor, FactorScore]:
        return {f.factor: f for pillar in self.pillars for f in pillar.factors}

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "total": self.total,
            "max_total": MAX_TOTAL_SCORE,
            "level": self.level,
            "level_title": self.level_title,
            "trajectory": self.trajectory.to_dict(),
            "behavior": self.behavior.to_dict(),
            "position": self.position.to_dict(),
            "tips": list(self.tips),
            "previous_score": self.previous_score,
            "data_completeness": self.data_completeness.to_dict(),
        }


@dataclass(frozen=True)
class ScoreChange:
    """Difference between two scoring runs."""
    change: int
    improved: List[str]
    declined: List[str]
