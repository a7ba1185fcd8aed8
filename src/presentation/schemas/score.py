"""Score-related Pydantic schemas."""

from datetime import date
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.application.dto import (
    Account,
    FinancialProfile,
    FinancialSnapshot,
    SavingsContribution,
    SavingsGoal,
)
from src.service.scoring import (
    BillPayment,
    Budget,
    DebtPayment,
    DebtRecord,
    DebtType,
    HouseholdType,
    Transaction,
)


# =============================================================================
# Request
# =============================================================================

class ProfileSchema(BaseModel):
    """What the user told us about their income and household."""

    monthly_income: float = Field(0.0, ge=0, description="Self-reported monthly income")
    income_confirmed: bool = Field(
        False,
        description="The user confirmed their monthly income is accurate",
    )
    household_type: Optional[HouseholdType] = Field(
        None,
        description="Household income structure, used for the emergency fund target",
    )
    has_confirmed_no_debt: bool = Field(
        False,
        description="The user confirmed they have no debts",
    )


class AccountSchema(BaseModel):
    type: str = Field(..., min_length=1, examples=["checking"])
    balance: float = Field(..., description="Current balance (negative when overdrawn)")
    name: Optional[str] = None


class DebtSchema(BaseModel):
    """An active debt."""

    id: str = Field(..., min_length=1, max_length=255)
    type: DebtType = Field(..., examples=["credit_card"])
    current_balance: float = Field(..., ge=0)
    monthly_payment: Optional[float] = Field(None, ge=0)
    minimum_payment: Optional[float] = Field(None, ge=0)
    apr: float = Field(0.0, ge=0)
    in_collections: bool = False
    origination_term_months: Optional[int] = Field(None, gt=0)


class DebtPaymentSchema(BaseModel):
    debt_id: str = Field(..., min_length=1)
    date: date
    amount: float = Field(..., ge=0)
    is_extra: bool = False


class SavingsGoalSchema(BaseModel):
    type: str = Field("general", examples=["emergency"])
    current_amount: float = Field(0.0, ge=0)
    monthly_contribution: float = Field(0.0, ge=0)


class SavingsContributionSchema(BaseModel):
    date: date
    amount: float


class BillPaymentSchema(BaseModel):
    due_date: date
    status: str = Field(
        ...,
        min_length=1,
        description=(
            "on_time, late_1_30, late_31_60, late_61_90, late_91_120, "
            "late_120_plus, late_61_plus or missed"
        ),
        examples=["on_time"],
    )


class BudgetSchema(BaseModel):
    category_id: str = Field(..., min_length=1)
    budgeted: float = Field(..., ge=0)


class TransactionSchema(BaseModel):
    date: date
    amount: float = Field(..., description="Positive for inflows, negative for outflows")
    category_id: Optional[str] = None


class ScoreRequestSchema(BaseModel):
    """Schema for POST /v1/score request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "user_id": "user_123",
                    "profile": {"monthly_income": 5000, "household_type": "single_income"},
                    "accounts": [{"type": "checking", "balance": 2500}],
                    "debts": [
                        {
                            "id": "cc-1",
                            "type": "credit_card",
                            "current_balance": 3000,
                            "minimum_payment": 90,
                            "apr": 22.9,
                        }
                    ],
                    "bill_payments": [{"due_date": "2025-09-01", "status": "on_time"}],
                    "budgets": [{"category_id": "groceries", "budgeted": 600}],
                    "transactions": [
                        {"date": "2025-09-01", "amount": 5000},
                        {"date": "2025-09-03", "amount": -450, "category_id": "groceries"},
                    ],
                }
            ]
        }
    )

    user_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Unique identifier for the user",
        examples=["user_123"],
    )
    profile: ProfileSchema = Field(default_factory=ProfileSchema)
    accounts: list[AccountSchema] = Field(default_factory=list)
    debts: list[DebtSchema] = Field(default_factory=list)
    debt_payments: list[DebtPaymentSchema] = Field(default_factory=list)
    savings_goals: list[SavingsGoalSchema] = Field(default_factory=list)
    savings_contributions: list[SavingsContributionSchema] = Field(default_factory=list)
    bill_payments: list[BillPaymentSchema] = Field(default_factory=list)
    budgets: list[BudgetSchema] = Field(default_factory=list)
    transactions: list[TransactionSchema] = Field(default_factory=list)

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        """Ensure user_id is not just whitespace."""
        if not v.strip():
            raise ValueError("user_id cannot be empty or whitespace")
        return v.strip()

    def to_snapshot(self) -> FinancialSnapshot:
        """Convert the request body into the application's snapshot DTO."""
        return FinancialSnapshot(
            profile=FinancialProfile(**self.profile.model_dump()),
            accounts=[Account(**a.model_dump()) for a in self.accounts],
            debts=[DebtRecord(**d.model_dump()) for d in self.debts],
            debt_payments=[DebtPayment(**p.model_dump()) for p in self.debt_payments],
            savings_goals=[SavingsGoal(**g.model_dump()) for g in self.savings_goals],
            savings_contributions=[
                SavingsContribution(**c.model_dump()) for c in self.savings_contributions
            ],
            bill_payments=[BillPayment(**b.model_dump()) for b in self.bill_payments],
            budgets=[Budget(**b.model_dump()) for b in self.budgets],
            transactions=[Transaction(**t.model_dump()) for t in self.transactions],
        )


# =============================================================================
# Response
# =============================================================================

class FactorScoreSchema(BaseModel):
    """Schema for one sub-factor in the response."""

    score: int = Field(..., ge=0)
    max: int = Field(..., gt=0)
    percentage: float = Field(..., ge=0, le=100, description="score / max, 0-100")
    detail: str = Field(..., description="Human-readable explanation")


class PillarScoreSchema(BaseModel):
    """Schema for a pillar and its sub-factors."""

    score: int = Field(..., ge=0)
    max: int = Field(..., gt=0)
    factors: Dict[str, FactorScoreSchema]


class ScoreChangeSchema(BaseModel):
    change: int = Field(..., description="Total minus the previous total")
    improved: list[str] = Field(..., description="Sub-factors that went up")
    declined: list[str] = Field(..., description="Sub-factors that went down")


class HistoryPointSchema(BaseModel):
    scored_date: str = Field(..., description="ISO 8601 date", examples=["2025-09-17"])
    total: int
    level: int
    trajectory: int
    behavior: int
    position: int


class ScoreResponseSchema(BaseModel):
    """Schema for POST /v1/score response body."""

    user_id: str
    scored_date: str = Field(..., description="ISO 8601 date the score is recorded under")
    total: int = Field(..., ge=0, le=1000)
    max_total: int = Field(..., examples=[1000])
    level: int = Field(..., ge=0, le=5)
    level_title: str = Field(..., examples=["Solid Ground"])
    trajectory: PillarScoreSchema
    behavior: PillarScoreSchema
    position: PillarScoreSchema
    tips: list[str] = Field(..., description="Improvement tips, highest opportunity first")
    previous_score: Optional[int] = Field(
        None,
        description="Total from the most recent earlier day, if any",
    )
    change: Optional[ScoreChangeSchema] = None
    data_completeness: Dict[str, bool] = Field(
        ...,
        description="Flags for optional data that was missing",
    )
    history: list[HistoryPointSchema] = Field(
        ...,
        description="Recent daily scores, newest first",
    )
    history_available: bool = Field(
        ...,
        description="False when the history store could not be reached",
    )


class ScoreHistoryResponseSchema(BaseModel):
    """Schema for GET /v1/score/history response."""

    user_id: str
    history: list[HistoryPointSchema] = Field(
        ...,
        description="Daily scores, newest first",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "user_id": "user_123",
                    "history": [
                        {
                            "scored_date": "2025-09-17",
                            "total": 642,
                            "level": 3,
                            "trajectory": 210,
                            "behavior": 260,
                            "position": 172,
                        }
                    ],
                }
            ]
        }
    )
