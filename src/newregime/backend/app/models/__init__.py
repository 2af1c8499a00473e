"""Typed request/response models shared across the calculation services.

Inputs are Pydantic models so routes, the CLI and the session helper share one
set of coercion rules. The engine's result is a plain frozen dataclass: it is
produced once per calculation and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from .api import (
    INCOME_FIELDS,
    CalculationRequest,
    CalculationResponse,
    DisplaySummary,
    IncomeInput,
    ResponseMeta,
    SlabEntry,
    Summary,
    coerce_amount,
    format_validation_error,
)

__all__ = [
    "INCOME_FIELDS",
    "TaxBreakdown",
    "CalculationRequest",
    "CalculationResponse",
    "DisplaySummary",
    "IncomeInput",
    "ResponseMeta",
    "SlabEntry",
    "Summary",
    "coerce_amount",
    "format_validation_error",
]


@dataclass(frozen=True, slots=True)
class TaxBreakdown:
    """Result of a single new regime tax computation."""

    total_income: float
    standard_deductions: float
    taxable_income: float
    computed_tax: float
    final_tax_before_cess: float
    cess: float
    tax_payable: float

    @property
    def rebate_applied(self) -> bool:
        return self.computed_tax > 0 and self.final_tax_before_cess == 0

    @property
    def marginal_relief_applied(self) -> bool:
        return 0 < self.final_tax_before_cess < self.computed_tax

    def as_dict(self) -> dict[str, Any]:
        """Return the breakdown as a plain mapping."""

        return asdict(self)
