"""Data transfer objects describing a user's raw financial data."""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from src.service.scoring import (
    BillPayment,
    Budget,
    DebtPayment,
    DebtRecord,
    HouseholdType,
    Transaction,
)


@dataclass(frozen=True)
class Account:
    """A bank or brokerage account and its current balance."""
    type: str  # checking, savings, money_market, cash, brokerage, retirement, ...
    balance: float
    name: Optional[str] = None


@dataclass(frozen=True)
class SavingsGoal:
    """An active savings goal."""
    type: str  # emergency, general, custom, hsa, retirement_401k, ira, brokerage, education_529
    current_amount: float = 0.0
    monthly_contribution: float = 0.0


@dataclass(frozen=True)
class SavingsContribution:
    """A logged deposit into a savings goal."""
    date: date
    amount: float


@dataclass(frozen=True)
class FinancialProfile:
    """What the user told us about themselves."""
    monthly_income: float = 0.0
    income_confirmed: bool = False
    household_type: Optional[HouseholdType] = None
    has_confirmed_no_debt: bool = False


@dataclass(frozen=True)
class FinancialSnapshot:
    """
    Everything read from storage for one scoring run.

    Lists hold active records only. Transactions, debt payments and savings
    contributions should cover at least the trailing three months.
    """
    profile: FinancialProfile = field(default_factory=FinancialProfile)
    accounts: List[Account] = field(default_factory=list)
    debts: List[DebtRecord] = field(default_factory=list)
    debt_payments: List[DebtPayment] = field(default_factory=list)
    savings_goals: List[SavingsGoal] = field(default_factory=list)
    savings_contributions: List[SavingsContribution] = field(default_factory=list)
    bill_payments: List[BillPayment] = field(default_factory=list)
    budgets: List[Budget] = field(default_factory=list)
    transactions: List[Transaction] = field(default_factory=list)
