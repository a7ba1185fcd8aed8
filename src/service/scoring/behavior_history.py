"""
Behavioral History Aggregation for the Financial Health Score.

This module turns raw bill-payment, budget and transaction records into the
behavioral signals the Behavior pillar scores:
- Late-payment history: one severity-tiered event per late or missed bill,
  with how many months ago it was due
- Budget discipline: categories on track and average overspend
- Anti-gaming ratio: budgeted total vs. what is actually spent in those
  categories, to detect budgets inflated so adherence is trivially easy
"""

import math
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from .models import (
    BehaviorHistory,
    BillPayment,
    Budget,
    BudgetDiscipline,
    LatePaymentEvent,
    SeverityTier,
    Transaction,
)

logger = structlog.get_logger(__name__)

DAYS_PER_MONTH = 30.44
TRAILING_MONTHS = 3

ON_TIME_STATUS = "on_time"

STATUS_TO_TIER: Dict[str, SeverityTier] = {
    "late_1_30": SeverityTier.LATE_1_30,
    "late_31_60": SeverityTier.LATE_31_60,
    "late_61_90": SeverityTier.LATE_61_90,
    "late_61_plus": SeverityTier.LATE_61_90,  # Legacy bucket from before 91+ tiers existed
    "late_91_120": SeverityTier.LATE_91_120,
    "late_120_plus": SeverityTier.LATE_120_PLUS,
    "missed": SeverityTier.MISSED,
}


def months_ago(due_date: date, now: date) -> int:
    """
    Whole months between due_date and now.

    Rounded half-up to the nearest month using an average month length of
    30.44 days. Future due dates count as 0.
    """
    elapsed = (now - due_date).days / DAYS_PER_MONTH
    return max(0, math.floor(elapsed + 0.5))


def severity_tier(status: str) -> Optional[SeverityTier]:
    """Map a stored bill status to a severity tier (None for on-time or unknown)."""
    return STATUS_TO_TIER.get(status.strip().lower())


def build_late_payment_history(
    bill_payments: Iterable[BillPayment],
    now: date,
) -> Tuple[int, Dict[SeverityTier, int], List[LatePaymentEvent]]:
    """
    Split bill payments into on-time count, per-tier late counts and events.

    Returns:
        (bills_paid_on_time, late_payment_counts, late_payment_history)
    """
    on_time = 0
    counts: Dict[SeverityTier, int] = defaultdict(int)
    history: List[LatePaymentEvent] = []

    for payment in bill_payments:
        status = payment.status.strip().lower()
        if status == ON_TIME_STATUS:
            on_time += 1
            continue

        tier = severity_tier(status)
        if tier is None:
            logger.warning("unknown_bill_status", status=payment.status)
            continue

        counts[tier] += 1
        history.append(
            LatePaymentEvent(severity_tier=tier, months_ago=months_ago(payment.due_date, now))
        )

    history.sort(key=lambda e: (e.months_ago, -e.severity_tier.rank))
    return on_time, dict(counts), history


def calculate_budget_discipline(
    budgets: Iterable[Budget],
    transactions: Iterable[Transaction],
    now: date,
) -> BudgetDiscipline:
    """
    Compare this month's spending against each category budget.

    Algorithm:
        1. Sum this month's outflows per category
        2. A category is on track when spent <= budgeted
        3. For overspent categories, average (spent - budgeted) / budgeted

    Edge Cases:
        - A zero budget with any spending counts as 100% over
        - No budgets: empty summary (the calculator scores it as neutral)
    """
    month_start = now.replace(day=1)
    spent_by_category: Dict[str, float] = defaultdict(float)
    for txn in transactions:
        if txn.is_expense and txn.category_id and month_start <= txn.date <= now:
            spent_by_category[txn.category_id] += abs(txn.amount)

    on_track = 0
    total = 0
    overspend_pcts: List[float] = []

    for budget in budgets:
        total += 1
        spent = spent_by_category.get(budget.category_id, 0.0)
        if spent <= budget.budgeted:
            on_track += 1
        elif budget.budgeted > 0:
            overspend_pcts.append((spent - budget.budgeted) / budget.budgeted * 100)
        else:
            overspend_pcts.append(100.0)

    average = sum(overspend_pcts) / len(overspend_pcts) if overspend_pcts else 0.0
    return BudgetDiscipline(on_track=on_track, total=total, average_overspend_pct=average)


def calculate_budget_to_spending_ratio(
    budgets: Iterable[Budget],
    transactions: Iterable[Transaction],
    now: date,
) -> Optional[float]:
    """
    Calculate the anti-gaming ratio.

    Algorithm:
        total budgeted / average monthly outflow in the budgeted categories,
        over the trailing three months.

    Business Rationale:
        A ratio near 1.0 means budgets track real spending. A ratio far above
        1.0 means budgets were set so high that staying "on track" takes no
        discipline at all.

    Returns:
        The ratio, math.inf when money is budgeted in categories with no
        spending at all, or None when nothing is budgeted.
    """
    budgets = list(budgets)
    total_budgeted = sum(max(0.0, b.budgeted) for b in budgets)
    if total_budgeted <= 0:
        return None

    categories = {b.category_id for b in budgets}
    window_start = now - timedelta(days=round(TRAILING_MONTHS * DAYS_PER_MONTH))

    trailing_spend = sum(
        abs(t.amount) for t in transactions
        if t.is_expense and t.category_id in categories and window_start <= t.date <= now
    )
    average_monthly_spend = trailing_spend / TRAILING_MONTHS

    if average_monthly_spend <= 0:
        return math.inf
    return total_budgeted / average_monthly_spend


def aggregate(
    bill_payments: Iterable[BillPayment],
    budgets: Iterable[Budget],
    transactions: Iterable[Transaction],
    now: date,
) -> BehaviorHistory:
    """
    Build every behavioral signal from raw records.

    Args:
        bill_payments: Bill occurrences with their payment status
        budgets: This month's category budgets
        transactions: At least the trailing three months of transactions
        now: Scoring date

    Returns:
        BehaviorHistory ready to feed into a ScoreInput
    """
    budgets = list(budgets)
    transactions = list(transactions)

    on_time, counts, history = build_late_payment_history(bill_payments, now)

    return BehaviorHistory(
        bills_paid_on_time=on_time,
        late_payment_counts=counts,
        late_payment_history=history,
        budget_discipline=calculate_budget_discipline(budgets, transactions, now),
        budget_to_spending_ratio=calculate_budget_to_spending_ratio(budgets, transactions, now),
    )
