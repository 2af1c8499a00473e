"""Caller-owned holder for the most recent calculation result."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from newregime.backend.app.models import IncomeInput, TaxBreakdown

from .calculation_service import calculate_breakdown


class CalculatorSession:
    """Remember the latest breakdown produced for one calculator form.

    Only a single result is kept: every calculation replaces the previous one
    and nothing is persisted.
    """

    def __init__(self, *, year: int | None = None) -> None:
        self.year = year
        self._latest: TaxBreakdown | None = None

    @property
    def latest(self) -> TaxBreakdown | None:
        return self._latest

    def calculate(self, income: IncomeInput | Mapping[str, Any] | None) -> TaxBreakdown:
        breakdown = calculate_breakdown(income, self.year)
        self._latest = breakdown
        return breakdown

    def reset(self) -> None:
        self._latest = None
