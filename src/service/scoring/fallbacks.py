"""
Ordered fallback chains.

Several inputs to the score come from a priority list of sources: the monthly
payment of a debt, the user's monthly income, the income used as a
debt-to-income denominator. Each of those is written as an explicit list of
steps evaluated top-down so the policy can be read (and tested) on its own:

    chain = [
        FallbackStep("actual_payment", lambda: record.monthly_payment is not None, lambda: record.monthly_payment),
        FallbackStep("estimated", lambda: True, lambda: record.current_balance / term),
    ]
    resolution = resolve_fallback(chain)
    resolution.value, resolution.source

Values are callables so a later step's arithmetic (e.g. a division) is never
evaluated unless every earlier step was rejected.
"""

from dataclasses import dataclass
from typing import Callable, Sequence


@dataclass(frozen=True)
class FallbackStep:
    """One (predicate, value) pair in a fallback chain."""
    source: str
    predicate: Callable[[], bool]
    value: Callable[[], float]


@dataclass(frozen=True)
class Resolution:
    """The value a chain resolved to and the step that produced it."""
    value: float
    source: str


def resolve_fallback(
    chain: Sequence[FallbackStep],
    default: float = 0.0,
) -> Resolution:
    """
    Return the value of the first step whose predicate holds.

    Args:
        chain: Steps in priority order
        default: Value used when no predicate holds

    Returns:
        Resolution with the winning value and the name of its step
        ("default" if none matched)
    """
    for step in chain:
        if step.predicate():
            return Resolution(value=float(step.value()), source=step.source)
    return Resolution(value=float(default), source="default")


def is_positive(value) -> bool:
    """True for numbers strictly greater than zero (None is not positive)."""
    return value is not None and value > 0
