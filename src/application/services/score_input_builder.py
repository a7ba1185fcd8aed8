"""
Score input assembly.

Turns a FinancialSnapshot (raw records as stored) into the ScoreInput the
engine consumes. All reads have already happened by the time this runs; the
builder is pure and takes the scoring date explicitly.
"""

import math
from datetime import date, timedelta
from typing import Iterable, List

import structlog

from src.application.dto import FinancialSnapshot, SavingsGoal
from src.service.scoring import (
    ScoreInput,
    Transaction,
    WealthContribution,
    aggregate,
    normalize_all,
    resolve_monthly_income,
)
from src.service.scoring.debt_normalizer import TRAILING_WINDOW_DAYS

logger = structlog.get_logger(__name__)

TRAILING_MONTHS = 3

# Savings goal types counted as cash that can be reached in an emergency
LIQUID_GOAL_TYPES = frozenset({"emergency", "general", "custom", "hsa"})
CASH_SAVINGS_GOAL_TYPES = ("emergency", "general", "custom")
LIQUID_ACCOUNT_TYPES = frozenset({"checking", "savings", "money_market", "cash"})

# Share of income assumed to be spent when transactions undercount expenses
EXPENSE_FLOOR_INCOME_SHARE = 0.6

INCOME_CONFIRMING_SOURCES = frozenset({"this_month_transactions", "trailing_average"})


def _in_window(day: date, start: date, end: date) -> bool:
    return start <= day <= end


def _goal_contributions_by_type(goals: Iterable[SavingsGoal]) -> dict:
    by_type: dict = {}
    for goal in goals:
        goal_type = goal.type or "general"
        by_type[goal_type] = by_type.get(goal_type, 0.0) + max(0.0, goal.monthly_contribution)
    return by_type


def calculate_monthly_expenses(
    trailing_outflows: float,
    total_debt_payments: float,
    monthly_income: float,
) -> float:
    """
    Estimate monthly expenses.

    Trailing three-month outflows / 3 are used when they exceed the monthly
    debt payments. Otherwise transactions are clearly incomplete, and expenses
    are taken as the larger of debt payments and 60% of income.
    """
    transaction_based = trailing_outflows / TRAILING_MONTHS
    if transaction_based > total_debt_payments:
        return transaction_based
    return max(total_debt_payments, monthly_income * EXPENSE_FLOOR_INCOME_SHARE)


def calculate_data_months(transactions: List[Transaction], now: date) -> int:
    """
    Months of transaction history, from the oldest transaction.

    At least 1 so a brand-new user is treated as having one month of history.
    """
    if not transactions:
        return 1
    oldest = min(t.date for t in transactions)
    return max(1, math.floor((now - oldest).days / 30))


def build_score_input(snapshot: FinancialSnapshot, now: date) -> ScoreInput:
    """
    Build the engine input from raw records.

    Args:
        snapshot: The user's raw financial records
        now: Scoring date

    Returns:
        A fully populated ScoreInput
    """
    window_start = now - timedelta(days=TRAILING_WINDOW_DAYS)
    month_start = now.replace(day=1)
    profile = snapshot.profile

    trailing = [t for t in snapshot.transactions if _in_window(t.date, window_start, now)]

    # Income
    income = resolve_monthly_income(
        income_this_month=sum(
            t.amount for t in trailing if t.is_income and t.date >= month_start
        ),
        trailing_three_month_income=sum(t.amount for t in trailing if t.is_income),
        profile_income=profile.monthly_income,
    )
    has_confirmed_income = profile.income_confirmed or income.source in INCOME_CONFIRMING_SOURCES

    # Debts
    current_debts, debts_three_months_ago = normalize_all(
        snapshot.debts, snapshot.debt_payments, now
    )
    total_debt_payments = sum(d.monthly_payment for d in current_debts if d.balance > 0)

    monthly_expenses = calculate_monthly_expenses(
        trailing_outflows=sum(abs(t.amount) for t in trailing if t.is_expense),
        total_debt_payments=total_debt_payments,
        monthly_income=income.value,
    )

    # Wealth building: the larger of what goals say and what was logged
    goal_contributions = _goal_contributions_by_type(snapshot.savings_goals)
    logged_contributions = sum(
        max(0.0, c.amount) for c in snapshot.savings_contributions
        if _in_window(c.date, window_start, now)
    )
    extra_debt_payments = sum(
        max(0.0, p.amount) for p in snapshot.debt_payments
        if p.is_extra and _in_window(p.date, window_start, now)
    )
    contributions = WealthContribution(
        cash_savings=max(
            sum(goal_contributions.get(t, 0.0) for t in CASH_SAVINGS_GOAL_TYPES),
            logged_contributions / TRAILING_MONTHS,
        ),
        retirement_401k=goal_contributions.get("retirement_401k", 0.0),
        ira=goal_contributions.get("ira", 0.0),
        investments=goal_contributions.get("brokerage", 0.0),
        hsa=goal_contributions.get("hsa", 0.0) + goal_contributions.get("education_529", 0.0),
        extra_debt_payments=extra_debt_payments / TRAILING_MONTHS,
    )

    # Liquid savings
    liquid_savings = sum(
        g.current_amount for g in snapshot.savings_goals if g.type in LIQUID_GOAL_TYPES
    ) + sum(
        a.balance for a in snapshot.accounts if a.type in LIQUID_ACCOUNT_TYPES
    )

    behavior = aggregate(
        snapshot.bill_payments,
        snapshot.budgets,
        snapshot.transactions,
        now,
    )

    logger.debug(
        "score_input_built",
        income_source=income.source,
        debts=len(current_debts),
        bills=behavior.total_bills,
        budgets=behavior.budget_discipline.total,
    )

    return ScoreInput(
        monthly_income=income.value,
        wealth_contributions=contributions,
        liquid_savings=liquid_savings,
        monthly_expenses=monthly_expenses,
        current_debts=current_debts,
        debts_three_months_ago=debts_three_months_ago,
        bills_paid_on_time=behavior.bills_paid_on_time,
        late_payment_counts=behavior.late_payment_counts,
        budgets_on_track=behavior.budget_discipline.on_track,
        total_budgets=behavior.budget_discipline.total,
        average_overspend_pct=behavior.budget_discipline.average_overspend_pct,
        late_payment_history=behavior.late_payment_history,
        budget_to_spending_ratio=behavior.budget_to_spending_ratio,
        household_type=profile.household_type,
        has_confirmed_no_debt=profile.has_confirmed_no_debt and not snapshot.debts,
        has_confirmed_income=has_confirmed_income,
        has_savings_goals=bool(snapshot.savings_goals),
        data_months=calculate_data_months(snapshot.transactions, now),
    )
