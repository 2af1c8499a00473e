"""Domain-specific calculation helpers."""

from .new_regime import (
    CESS_RATE,
    DEFAULT_ENGINE,
    NEW_REGIME_SLABS,
    REBATE_LIMIT,
    STANDARD_DEDUCTION,
    TaxEngine,
    compute,
)
from .utils import (
    allocate_progressive_tax,
    calculate_progressive_tax,
    format_currency,
    format_percentage,
    iter_bracket_bounds,
    marginal_rate,
    round_currency,
    round_rate,
)

__all__ = [
    "CESS_RATE",
    "DEFAULT_ENGINE",
    "NEW_REGIME_SLABS",
    "REBATE_LIMIT",
    "STANDARD_DEDUCTION",
    "TaxEngine",
    "allocate_progressive_tax",
    "calculate_progressive_tax",
    "compute",
    "format_currency",
    "format_percentage",
    "iter_bracket_bounds",
    "marginal_rate",
    "round_currency",
    "round_rate",
]
