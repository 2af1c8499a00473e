"""Utility helpers for calculator modules."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from newregime.backend.config.year_config import TaxBracket

CURRENCY_SYMBOL = "₹"


def format_percentage(value: float) -> str:
    """Return a human-readable percentage label for ``value``."""

    percentage = value * 100
    if float(int(percentage)) == percentage:
        return f"{int(percentage)}%"
    return f"{percentage:.2f}%"


def iter_bracket_bounds(
    brackets: Sequence[TaxBracket],
) -> list[tuple[float, float | None, float]]:
    """Return ``(lower, upper, rate)`` triples for ``brackets`` in order."""

    bounds: list[tuple[float, float | None, float]] = []
    lower_bound = 0.0
    for bracket in brackets:
        bounds.append((lower_bound, bracket.upper_bound, bracket.rate))
        if bracket.upper_bound is not None:
            lower_bound = bracket.upper_bound
    return bounds


def allocate_progressive_tax(
    amount: float, brackets: Sequence[TaxBracket]
) -> list[tuple[float, float]]:
    """Return the ``(taxed portion, tax)`` pair each bracket contributes.

    A bracket only contributes once ``amount`` exceeds its lower bound; the
    taxed portion is clamped at the bracket's upper bound.
    """

    allocations: list[tuple[float, float]] = []
    for lower, upper, rate in iter_bracket_bounds(brackets):
        if amount <= lower:
            allocations.append((0.0, 0.0))
            continue
        ceiling = amount if upper is None else min(amount, upper)
        portion = ceiling - lower
        allocations.append((portion, portion * rate))
    return allocations


def calculate_progressive_tax(amount: float, brackets: Sequence[TaxBracket]) -> float:
    """Calculate progressive tax for ``amount`` using ``brackets``."""

    total = 0.0
    for _, tax in allocate_progressive_tax(amount, brackets):
        total += tax
    return total


def marginal_rate(amount: float, brackets: Sequence[TaxBracket]) -> float:
    """Return the rate applied to the last unit of ``amount``."""

    rate = 0.0
    for lower, _, bracket_rate in iter_bracket_bounds(brackets):
        if amount > lower:
            rate = bracket_rate
    return rate


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals."""

    return round(value, 2)


def round_rate(value: float) -> float:
    """Round rate values to four decimals."""

    return round(value, 4)


def _group_indian(digits: str) -> str:
    # 12,34,56,789: the last three digits form one group, the rest pair up.
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(value: float, *, decimals: int | None = None) -> str:
    """Render ``value`` as rupees with Indian digit grouping.

    ``decimals`` fixes the number of fractional digits; when omitted the value
    is shown at full precision and whole amounts drop their fractional part.
    """

    number = float(value or 0)
    if decimals is None:
        text = format(Decimal(repr(abs(number))), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
    else:
        text = f"{abs(number):.{decimals}f}"

    whole, _, fraction = text.partition(".")
    rendered = _group_indian(whole)
    if fraction:
        rendered = f"{rendered}.{fraction}"

    sign = "-" if number < 0 and float(text) != 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{rendered}"
