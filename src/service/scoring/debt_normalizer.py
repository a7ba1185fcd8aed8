"""
Debt Normalization for the Financial Health Score.

Stored debt records are inconsistent: some have an actual payment, some only
a minimum, some nothing at all, and some "paid in full" cards quietly carry a
balance. This module turns each record into a NormalizedDebtEntry that the
pillar calculators can use without any further null checks:

- Monthly payment resolved through a fallback chain
- Paid-in-full cards carrying a balance reclassified as revolving credit
- The balance three months ago reconstructed from logged payments
"""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Tuple

from .fallbacks import FallbackStep, is_positive, resolve_fallback
from .models import DebtPayment, DebtRecord, DebtType, NormalizedDebtEntry


# Default loan terms (months) used to estimate a payment when none is stored
DEFAULT_TERM_MONTHS: Dict[DebtType, int] = {
    DebtType.MORTGAGE: 360,
    DebtType.HELOC: 240,
    DebtType.STUDENT: 120,
    DebtType.AUTO: 72,
    DebtType.PERSONAL: 48,
    DebtType.MEDICAL: 60,
    DebtType.CREDIT_CARD: 36,
    DebtType.CC_PAID_MONTHLY: 36,
    DebtType.BNPL: 12,
    DebtType.PAYDAY: 3,
    DebtType.BUSINESS: 60,
    DebtType.ZERO_PCT: 12,
    DebtType.SECURED: 60,
    DebtType.OTHER: 60,
}

# Velocity weights: how much a dollar of this debt type counts against you.
# Derived from rate risk, asset backing and delinquency risk.
DEBT_TYPE_WEIGHTS: Dict[DebtType, float] = {
    DebtType.PAYDAY: 2.5,           # 400%+ APR, high re-borrow rate
    DebtType.CREDIT_CARD: 1.5,      # ~24% APR, unsecured
    DebtType.BNPL: 1.3,             # Fragmented impulse consumption
    DebtType.PERSONAL: 1.0,
    DebtType.OTHER: 1.0,
    DebtType.AUTO: 0.7,             # Depreciating but essential asset
    DebtType.BUSINESS: 0.6,
    DebtType.STUDENT: 0.5,          # Human capital, federal protections
    DebtType.MEDICAL: 0.4,          # Involuntary
    DebtType.HELOC: 0.35,
    DebtType.MORTGAGE: 0.3,         # Asset-building, lowest default rate
    DebtType.ZERO_PCT: 0.2,         # Near-zero cost
    DebtType.SECURED: 0.1,          # Collateral covers it
    DebtType.CC_PAID_MONTHLY: 0.0,  # Responsible card use, no carried balance
}

TRAILING_WINDOW_DAYS = 91  # ~three months at 30.44 days each


def default_term_months(debt_type: DebtType) -> int:
    return DEFAULT_TERM_MONTHS.get(debt_type, DEFAULT_TERM_MONTHS[DebtType.OTHER])


def debt_type_weight(debt_type: DebtType) -> float:
    return DEBT_TYPE_WEIGHTS.get(debt_type, 1.0)


def scoring_type(record: DebtRecord) -> DebtType:
    """
    Determine the debt type used for scoring.

    A card tagged as paid in full every month but carrying a balance is a
    revolving balance in disguise. It is scored as an ordinary credit card so a
    mislabeled balance cannot dodge the velocity penalty. The stored record is
    left untouched.
    """
    if record.type == DebtType.CC_PAID_MONTHLY and record.current_balance > 0:
        return DebtType.CREDIT_CARD
    return record.type


def resolve_monthly_payment(record: DebtRecord, balance: float) -> float:
    """
    Resolve the monthly payment for a debt.

    Fallback chain:
        1. Stored actual monthly payment
        2. Stored minimum payment
        3. balance / term, where term is the origination term if stored or the
           default term for the debt type

    The result is strictly positive whenever the balance is positive.
    """
    term = (
        record.origination_term_months
        if is_positive(record.origination_term_months)
        else default_term_months(record.type)
    )
    chain = [
        FallbackStep(
            "actual_payment",
            lambda: is_positive(record.monthly_payment),
            lambda: record.monthly_payment,
        ),
        FallbackStep(
            "minimum_payment",
            lambda: is_positive(record.minimum_payment),
            lambda: record.minimum_payment,
        ),
        FallbackStep(
            "balance_over_term",
            lambda: balance > 0,
            lambda: balance / term,
        ),
    ]
    return resolve_fallback(chain).value


def normalize(record: DebtRecord) -> NormalizedDebtEntry:
    """
    Convert a stored debt record into its canonical scoring form.

    Args:
        record: The stored debt

    Returns:
        NormalizedDebtEntry with a non-null monthly payment and the scoring type
    """
    debt_type = scoring_type(record)
    return NormalizedDebtEntry(
        type=debt_type,
        balance=record.current_balance,
        monthly_payment=resolve_monthly_payment(record, record.current_balance),
        apr=record.apr or 0.0,
        in_collections=record.in_collections,
        reclassified=debt_type != record.type,
    )


def payments_in_window(
    payments: Iterable[DebtPayment],
    debt_id: str,
    now: date,
) -> float:
    """Sum of payments logged against debt_id in the trailing three months."""
    window_start = now - timedelta(days=TRAILING_WINDOW_DAYS)
    return sum(
        p.amount for p in payments
        if p.debt_id == debt_id and window_start <= p.date <= now and p.amount > 0
    )


def normalize_prior(
    record: DebtRecord,
    payments: Iterable[DebtPayment],
    now: date,
) -> NormalizedDebtEntry:
    """
    Reconstruct the entry for this debt as it stood three months ago.

    Algorithm:
        balance = current balance + every payment logged against the debt in
        the trailing three months. This undoes the principal reduction and
        approximates the earlier balance (interest is ignored).

    The payment figure is resolved through the same fallback chain, using the
    reconstructed balance for the term-based estimate. Reclassification is
    based on the current record.
    """
    balance = record.current_balance + payments_in_window(payments, record.id, now)
    debt_type = scoring_type(record)
    return NormalizedDebtEntry(
        type=debt_type,
        balance=balance,
        monthly_payment=resolve_monthly_payment(record, balance),
        apr=record.apr or 0.0,
        in_collections=record.in_collections,
        reclassified=debt_type != record.type,
    )


def normalize_all(
    records: Iterable[DebtRecord],
    payments: Iterable[DebtPayment],
    now: date,
) -> Tuple[List[NormalizedDebtEntry], List[NormalizedDebtEntry]]:
    """
    Normalize every debt into (current entries, entries three months ago).
    """
    records = list(records)
    payments = list(payments)
    current = [normalize(r) for r in records]
    prior = [normalize_prior(r, payments, now) for r in records]
    return current, prior
