"""
Unit Tests for Debt Normalization.

These tests verify:
1. Monthly payment fallback chain (actual -> minimum -> balance / term)
2. Reclassification of paid-in-full cards that carry a balance
3. Reconstruction of the balance three months ago from logged payments

Test Categories:
- TestPaymentResolution: fallback chain order and term defaults
- TestReclassification: scoring type vs stored type
- TestPriorBalance: trailing-window payment add-back
- TestNormalizeAll: paired current/prior output
"""

import pytest
from datetime import date, timedelta

from src.service.scoring.debt_normalizer import (
    DEFAULT_TERM_MONTHS,
    debt_type_weight,
    normalize,
    normalize_all,
    normalize_prior,
    payments_in_window,
    resolve_monthly_payment,
)
from src.service.scoring.models import DebtPayment, DebtRecord, DebtType


NOW = date(2025, 6, 30)


# =============================================================================
# Test Fixtures
# =============================================================================

def make_debt(
    debt_type: DebtType = DebtType.CREDIT_CARD,
    balance: float = 3000.0,
    debt_id: str = "d1",
    **kwargs,
) -> DebtRecord:
    """Helper to create a debt record with sensible defaults."""
    return DebtRecord(id=debt_id, type=debt_type, current_balance=balance, **kwargs)


def make_payment(days_ago: int, amount: float, debt_id: str = "d1", is_extra: bool = False) -> DebtPayment:
    """Helper to create a debt payment relative to NOW."""
    return DebtPayment(
        debt_id=debt_id,
        date=NOW - timedelta(days=days_ago),
        amount=amount,
        is_extra=is_extra,
    )


# =============================================================================
# Payment Resolution Tests
# =============================================================================

class TestPaymentResolution:
    """Tests for resolve_monthly_payment()."""

    def test_actual_payment_wins(self):
        """A stored actual payment is used even when a minimum exists."""
        debt = make_debt(monthly_payment=150.0, minimum_payment=90.0)
        assert resolve_monthly_payment(debt, debt.current_balance) == 150.0

    def test_minimum_payment_when_no_actual(self):
        debt = make_debt(minimum_payment=90.0)
        assert resolve_monthly_payment(debt, debt.current_balance) == 90.0

    def test_zero_actual_payment_falls_through(self):
        """A zero actual payment is treated as missing."""
        debt = make_debt(monthly_payment=0.0, minimum_payment=90.0)
        assert resolve_monthly_payment(debt, debt.current_balance) == 90.0

    def test_estimated_from_default_term(self):
        """Without any payment figure, balance / default term is used."""
        debt = make_debt(DebtType.AUTO, balance=7200.0)
        assert resolve_monthly_payment(debt, debt.current_balance) == pytest.approx(100.0)

    def test_estimated_from_origination_term(self):
        """A stored origination term overrides the type default."""
        debt = make_debt(DebtType.PERSONAL, balance=4800.0, origination_term_months=24)
        assert resolve_monthly_payment(debt, debt.current_balance) == pytest.approx(200.0)

    def test_payday_short_term(self):
        debt = make_debt(DebtType.PAYDAY, balance=900.0)
        assert resolve_monthly_payment(debt, debt.current_balance) == pytest.approx(300.0)

    def test_zero_balance_without_payment_is_zero(self):
        debt = make_debt(DebtType.MEDICAL, balance=0.0)
        assert resolve_monthly_payment(debt, 0.0) == 0.0

    @pytest.mark.parametrize("debt_type", list(DebtType))
    def test_every_type_has_a_positive_estimate(self, debt_type):
        """Every debt type resolves to a positive payment when it has a balance."""
        debt = make_debt(debt_type, balance=1000.0)
        payment = normalize(debt).monthly_payment
        assert payment is not None
        assert payment > 0

    def test_default_terms_match_policy(self):
        assert DEFAULT_TERM_MONTHS[DebtType.MORTGAGE] == 360
        assert DEFAULT_TERM_MONTHS[DebtType.HELOC] == 240
        assert DEFAULT_TERM_MONTHS[DebtType.STUDENT] == 120
        assert DEFAULT_TERM_MONTHS[DebtType.BNPL] == 12
        assert DEFAULT_TERM_MONTHS[DebtType.PAYDAY] == 3


# =============================================================================
# Reclassification Tests
# =============================================================================

class TestReclassification:
    """Tests for the paid-in-full card reclassification rule."""

    def test_paid_monthly_card_with_balance_scored_as_credit_card(self):
        debt = make_debt(DebtType.CC_PAID_MONTHLY, balance=1200.0)

        entry = normalize(debt)

        assert entry.type == DebtType.CREDIT_CARD
        assert entry.reclassified is True

    def test_stored_record_is_not_changed(self):
        debt = make_debt(DebtType.CC_PAID_MONTHLY, balance=1200.0)

        normalize(debt)

        assert debt.type == DebtType.CC_PAID_MONTHLY

    def test_paid_monthly_card_without_balance_keeps_type(self):
        debt = make_debt(DebtType.CC_PAID_MONTHLY, balance=0.0)

        entry = normalize(debt)

        assert entry.type == DebtType.CC_PAID_MONTHLY
        assert entry.reclassified is False

    def test_reclassified_entry_carries_credit_card_weight(self):
        """A mislabeled revolving balance cannot dodge the velocity weight."""
        entry = normalize(make_debt(DebtType.CC_PAID_MONTHLY, balance=1200.0))
        assert debt_type_weight(entry.type) == debt_type_weight(DebtType.CREDIT_CARD)
        assert debt_type_weight(DebtType.CC_PAID_MONTHLY) == 0.0

    def test_reclassification_is_deterministic(self):
        """The same record always normalizes to the same entry."""
        debt = make_debt(DebtType.CC_PAID_MONTHLY, balance=1200.0, apr=19.9)
        assert normalize(debt) == normalize(debt)

    def test_other_types_never_reclassified(self):
        for debt_type in DebtType:
            if debt_type == DebtType.CC_PAID_MONTHLY:
                continue
            entry = normalize(make_debt(debt_type, balance=500.0))
            assert entry.type == debt_type
            assert entry.reclassified is False

    def test_negative_balance_rejected(self):
        with pytest.raises(ValueError):
            make_debt(balance=-1.0)


# =============================================================================
# Prior Balance Tests
# =============================================================================

class TestPriorBalance:
    """Tests for normalize_prior() and payments_in_window()."""

    def test_payments_added_back(self):
        debt = make_debt(balance=3000.0, monthly_payment=200.0)
        payments = [make_payment(45, 200.0), make_payment(15, 200.0)]

        prior = normalize_prior(debt, payments, NOW)

        assert prior.balance == pytest.approx(3400.0)
        assert prior.monthly_payment == 200.0

    def test_payments_outside_window_ignored(self):
        debt = make_debt(balance=3000.0)
        payments = [make_payment(150, 500.0), make_payment(10, 100.0)]

        assert payments_in_window(payments, "d1", NOW) == pytest.approx(100.0)
        assert normalize_prior(debt, payments, NOW).balance == pytest.approx(3100.0)

    def test_payments_for_other_debts_ignored(self):
        debt = make_debt(balance=3000.0)
        payments = [make_payment(10, 100.0, debt_id="d2")]

        assert normalize_prior(debt, payments, NOW).balance == pytest.approx(3000.0)

    def test_estimated_payment_uses_reconstructed_balance(self):
        debt = make_debt(DebtType.AUTO, balance=7200.0)
        payments = [make_payment(20, 7200.0)]

        prior = normalize_prior(debt, payments, NOW)

        assert prior.balance == pytest.approx(14400.0)
        assert prior.monthly_payment == pytest.approx(200.0)

    def test_paid_off_debt_reconstructs_balance(self):
        """A debt paid off during the window still appears in the prior snapshot."""
        debt = make_debt(balance=0.0)
        payments = [make_payment(30, 800.0)]

        assert normalize_prior(debt, payments, NOW).balance == pytest.approx(800.0)


# =============================================================================
# normalize_all Tests
# =============================================================================

class TestNormalizeAll:
    """Tests for normalize_all()."""

    def test_returns_paired_lists(self):
        debts = [
            make_debt(DebtType.CREDIT_CARD, 3000.0, debt_id="cc"),
            make_debt(DebtType.MORTGAGE, 200000.0, debt_id="home", monthly_payment=1400.0),
        ]
        payments = [make_payment(20, 300.0, debt_id="cc")]

        current, prior = normalize_all(debts, payments, NOW)

        assert len(current) == len(prior) == 2
        assert current[0].balance == 3000.0
        assert prior[0].balance == pytest.approx(3300.0)
        assert current[1].balance == prior[1].balance == 200000.0

    def test_reclassification_applies_to_both_snapshots(self):
        debts = [make_debt(DebtType.CC_PAID_MONTHLY, 1200.0)]

        current, prior = normalize_all(debts, [], NOW)

        assert current[0].type == prior[0].type == DebtType.CREDIT_CARD

    def test_empty_input(self):
        assert normalize_all([], [], NOW) == ([], [])
