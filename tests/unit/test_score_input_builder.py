"""
Unit Tests for ScoreInput assembly.

These tests verify:
1. Income resolution and the income-confirmed flag
2. Expense estimation when transactions undercount spending
3. Wealth contributions, liquid savings and debt normalization
4. Months of history for the cold-start confidence
"""

import pytest
from datetime import date, timedelta

from src.application.dto import (
    Account,
    FinancialProfile,
    FinancialSnapshot,
    SavingsContribution,
    SavingsGoal,
)
from src.application.services.score_input_builder import (
    build_score_input,
    calculate_data_months,
    calculate_monthly_expenses,
)
from src.service.scoring import (
    BillPayment,
    Budget,
    DebtPayment,
    DebtRecord,
    DebtType,
    HouseholdType,
    SeverityTier,
    Transaction,
)


NOW = date(2025, 6, 20)


def days_ago(days: int) -> date:
    return NOW - timedelta(days=days)


# =============================================================================
# Income
# =============================================================================

class TestIncome:
    """Income resolution inside build_score_input()."""

    def test_income_from_this_months_transactions(self):
        snapshot = FinancialSnapshot(
            profile=FinancialProfile(monthly_income=4000.0),
            transactions=[Transaction(days_ago(5), 5200.0)],
        )

        score_input = build_score_input(snapshot, NOW)

        assert score_input.monthly_income == 5200.0
        assert score_input.has_confirmed_income is True

    def test_income_from_trailing_average(self):
        snapshot = FinancialSnapshot(
            transactions=[
                Transaction(days_ago(30), 4500.0),
                Transaction(days_ago(60), 4500.0),
                Transaction(days_ago(85), 4500.0),
            ],
        )

        score_input = build_score_input(snapshot, NOW)

        assert score_input.monthly_income == pytest.approx(4500.0)
        assert score_input.has_confirmed_income is True

    def test_profile_income_unconfirmed(self):
        snapshot = FinancialSnapshot(profile=FinancialProfile(monthly_income=4000.0))

        score_input = build_score_input(snapshot, NOW)

        assert score_input.monthly_income == 4000.0
        assert score_input.has_confirmed_income is False

    def test_profile_income_confirmed_by_user(self):
        snapshot = FinancialSnapshot(
            profile=FinancialProfile(monthly_income=4000.0, income_confirmed=True)
        )

        assert build_score_input(snapshot, NOW).has_confirmed_income is True


# =============================================================================
# Expenses
# =============================================================================

class TestMonthlyExpenses:
    """Tests for calculate_monthly_expenses()."""

    def test_transaction_based(self):
        assert calculate_monthly_expenses(9000.0, 150.0, 5000.0) == pytest.approx(3000.0)

    def test_incomplete_transactions_use_income_share(self):
        """Outflows below debt payments mean transactions are missing."""
        assert calculate_monthly_expenses(300.0, 500.0, 5000.0) == pytest.approx(3000.0)

    def test_debt_payments_as_floor(self):
        assert calculate_monthly_expenses(0.0, 800.0, 0.0) == pytest.approx(800.0)

    def test_nothing_known(self):
        assert calculate_monthly_expenses(0.0, 0.0, 0.0) == 0.0


# =============================================================================
# Data Months
# =============================================================================

class TestDataMonths:
    """Tests for calculate_data_months()."""

    def test_no_transactions_is_one_month(self):
        assert calculate_data_months([], NOW) == 1

    def test_recent_history_is_one_month(self):
        assert calculate_data_months([Transaction(days_ago(10), -20.0)], NOW) == 1

    def test_counted_from_oldest_transaction(self):
        transactions = [Transaction(days_ago(10), -20.0), Transaction(days_ago(95), -20.0)]
        assert calculate_data_months(transactions, NOW) == 3


# =============================================================================
# Full Assembly
# =============================================================================

class TestBuildScoreInput:
    """Tests for build_score_input()."""

    def test_wealth_contributions(self):
        snapshot = FinancialSnapshot(
            savings_goals=[
                SavingsGoal("emergency", monthly_contribution=300.0),
                SavingsGoal("general", monthly_contribution=100.0),
                SavingsGoal("retirement_401k", monthly_contribution=250.0),
                SavingsGoal("hsa", monthly_contribution=50.0),
                SavingsGoal("education_529", monthly_contribution=25.0),
                SavingsGoal("brokerage", monthly_contribution=100.0),
            ],
            savings_contributions=[
                SavingsContribution(days_ago(10), 300.0),
                SavingsContribution(days_ago(40), 300.0),
                SavingsContribution(days_ago(200), 5000.0),
            ],
            debts=[DebtRecord("cc", DebtType.CREDIT_CARD, 2000.0, monthly_payment=100.0)],
            debt_payments=[
                DebtPayment("cc", days_ago(20), 150.0, is_extra=True),
                DebtPayment("cc", days_ago(50), 150.0, is_extra=True),
                DebtPayment("cc", days_ago(50), 100.0),
            ],
        )

        contributions = build_score_input(snapshot, NOW).wealth_contributions

        assert contributions.cash_savings == pytest.approx(400.0)
        assert contributions.retirement_401k == 250.0
        assert contributions.hsa == pytest.approx(75.0)
        assert contributions.investments == 100.0
        assert contributions.extra_debt_payments == pytest.approx(100.0)

    def test_logged_contributions_win_when_larger(self):
        snapshot = FinancialSnapshot(
            savings_goals=[SavingsGoal("emergency", monthly_contribution=50.0)],
            savings_contributions=[SavingsContribution(days_ago(15), 900.0)],
        )

        assert build_score_input(snapshot, NOW).wealth_contributions.cash_savings == pytest.approx(300.0)

    def test_liquid_savings(self):
        snapshot = FinancialSnapshot(
            savings_goals=[
                SavingsGoal("emergency", current_amount=2000.0),
                SavingsGoal("hsa", current_amount=500.0),
                SavingsGoal("retirement_401k", current_amount=10000.0),
            ],
            accounts=[
                Account("checking", 1500.0),
                Account("savings", 3000.0),
                Account("brokerage", 20000.0),
            ],
        )

        assert build_score_input(snapshot, NOW).liquid_savings == pytest.approx(7000.0)

    def test_debts_normalized_and_reconstructed(self):
        snapshot = FinancialSnapshot(
            debts=[DebtRecord("card", DebtType.CC_PAID_MONTHLY, 1200.0, monthly_payment=200.0)],
            debt_payments=[DebtPayment("card", days_ago(30), 200.0)],
        )

        score_input = build_score_input(snapshot, NOW)

        assert score_input.current_debts[0].type == DebtType.CREDIT_CARD
        assert score_input.current_debts[0].balance == 1200.0
        assert score_input.debts_three_months_ago[0].balance == pytest.approx(1400.0)

    def test_confirmed_no_debt_requires_no_debts(self):
        profile = FinancialProfile(has_confirmed_no_debt=True)

        no_debts = build_score_input(FinancialSnapshot(profile=profile), NOW)
        with_debts = build_score_input(
            FinancialSnapshot(
                profile=profile,
                debts=[DebtRecord("d", DebtType.AUTO, 9000.0)],
            ),
            NOW,
        )

        assert no_debts.has_confirmed_no_debt is True
        assert with_debts.has_confirmed_no_debt is False

    def test_behavior_and_profile_fields(self):
        snapshot = FinancialSnapshot(
            profile=FinancialProfile(household_type=HouseholdType.SELF_EMPLOYED),
            savings_goals=[SavingsGoal("emergency")],
            bill_payments=[
                BillPayment(days_ago(5), "on_time"),
                BillPayment(days_ago(35), "late_1_30"),
            ],
            budgets=[Budget("groceries", 500.0)],
            transactions=[
                Transaction(days_ago(3), -450.0, "groceries"),
                Transaction(days_ago(130), -20.0),
            ],
        )

        score_input = build_score_input(snapshot, NOW)

        assert score_input.household_type == HouseholdType.SELF_EMPLOYED
        assert score_input.has_savings_goals is True
        assert score_input.bills_paid_on_time == 1
        assert score_input.late_payment_counts == {SeverityTier.LATE_1_30: 1}
        assert score_input.budgets_on_track == 1
        assert score_input.total_budgets == 1
        assert score_input.data_months == 4

    def test_empty_snapshot(self):
        score_input = build_score_input(FinancialSnapshot(), NOW)

        assert score_input.monthly_income == 0.0
        assert score_input.has_confirmed_income is False
        assert score_input.monthly_expenses == 0.0
        assert score_input.current_debts == []
        assert score_input.data_months == 1
