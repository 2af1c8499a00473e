"""New regime slab computation.

The engine is a pure function of the income figures and the year's
parameters: it never raises, performs no I/O and keeps no state between calls.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from newregime.backend.app.models import IncomeInput, TaxBreakdown
from newregime.backend.config.year_config import RegimeConfiguration, TaxBracket

from .utils import calculate_progressive_tax

STANDARD_DEDUCTION = 75000.0
REBATE_LIMIT = 1275000.0
CESS_RATE = 0.04

NEW_REGIME_SLABS: tuple[TaxBracket, ...] = (
    TaxBracket(upper=400000, rate=0.0),
    TaxBracket(upper=800000, rate=0.05),
    TaxBracket(upper=1200000, rate=0.10),
    TaxBracket(upper=1600000, rate=0.15),
    TaxBracket(upper=2000000, rate=0.20),
    TaxBracket(upper=2400000, rate=0.25),
    TaxBracket(rate=0.30),
)


@dataclass(frozen=True)
class TaxEngine:
    """Apply the new regime rules for one set of fiscal year parameters."""

    standard_deduction: float = STANDARD_DEDUCTION
    rebate_limit: float = REBATE_LIMIT
    cess_rate: float = CESS_RATE
    brackets: Sequence[TaxBracket] = NEW_REGIME_SLABS

    @classmethod
    def from_configuration(cls, config: RegimeConfiguration) -> TaxEngine:
        return cls(
            standard_deduction=config.standard_deduction,
            rebate_limit=config.rebate_limit,
            cess_rate=config.cess_rate,
            brackets=tuple(config.brackets),
        )

    def taxable_income(self, total_income: float) -> float:
        return max(0.0, total_income - self.standard_deduction)

    def apply_relief(self, total_income: float, computed_tax: float) -> float:
        """Apply the rebate, or cap liability at the income above the limit."""

        if total_income <= self.rebate_limit:
            return 0.0
        return min(computed_tax, total_income - self.rebate_limit)

    def compute(self, income: IncomeInput | Mapping[str, Any] | None) -> TaxBreakdown:
        """Return the full tax breakdown for ``income``."""

        if not isinstance(income, IncomeInput):
            income = IncomeInput.model_validate(income)

        total_income = income.total
        taxable_income = self.taxable_income(total_income)
        computed_tax = calculate_progressive_tax(taxable_income, self.brackets)
        final_tax_before_cess = self.apply_relief(total_income, computed_tax)
        cess = final_tax_before_cess * self.cess_rate
        tax_payable = final_tax_before_cess + cess

        return TaxBreakdown(
            total_income=total_income,
            standard_deductions=self.standard_deduction,
            taxable_income=taxable_income,
            computed_tax=computed_tax,
            final_tax_before_cess=final_tax_before_cess,
            cess=cess,
            tax_payable=tax_payable,
        )


DEFAULT_ENGINE = TaxEngine()


def compute(income: IncomeInput | Mapping[str, Any] | None) -> TaxBreakdown:
    """Compute the breakdown using the built-in FY 2025-26 parameters."""

    return DEFAULT_ENGINE.compute(income)
