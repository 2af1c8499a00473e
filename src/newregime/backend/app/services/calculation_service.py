"""Orchestrate request validation, configuration lookup, and tax calculations.

The calculation service coordinates the request models and the year-based
configuration so that the slab engine can stay a pure function. Profiling
hooks and payload validation live here to give the rest of the application a
simple ``calculate_tax`` entry point.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from newregime.backend.app.models import (
    CalculationRequest,
    CalculationResponse,
    IncomeInput,
    TaxBreakdown,
    format_validation_error,
)
from newregime.backend.config.year_config import (
    RegimeConfiguration,
    default_year,
    load_year_configuration,
)

from .calculators import (
    TaxEngine,
    allocate_progressive_tax,
    format_currency,
    format_percentage,
    iter_bracket_bounds,
    marginal_rate,
    round_rate,
)

_LOGGER = logging.getLogger(__name__)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("NEWREGIME_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _parse_request(payload: Mapping[str, Any] | CalculationRequest) -> CalculationRequest:
    if isinstance(payload, CalculationRequest):
        return payload
    if not isinstance(payload, Mapping):
        raise ValueError("Payload must be a mapping")
    try:
        return CalculationRequest.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def resolve_configuration(year: int | None) -> RegimeConfiguration:
    """Return the configuration for ``year``, defaulting to the latest year."""

    selected = default_year() if year is None else year
    try:
        return load_year_configuration(selected)
    except FileNotFoundError as exc:
        raise ValueError(f"Unsupported tax year: {selected}") from exc


def calculate_breakdown(
    income: IncomeInput | Mapping[str, Any] | None, year: int | None = None
) -> TaxBreakdown:
    """Run the slab engine for ``income`` using the configured ``year``."""

    config = resolve_configuration(year)
    return TaxEngine.from_configuration(config).compute(income)


def _slab_label(lower: float, upper: float | None) -> str:
    if upper is None:
        return f"Above {format_currency(lower)}"
    return f"{format_currency(lower)} - {format_currency(upper)}"


def build_slab_breakdown(
    breakdown: TaxBreakdown, config: RegimeConfiguration
) -> list[dict[str, Any]]:
    """Describe how much taxable income and tax each slab accounts for."""

    allocations = allocate_progressive_tax(breakdown.taxable_income, config.brackets)
    slabs: list[dict[str, Any]] = []
    for (lower, upper, rate), (portion, tax) in zip(
        iter_bracket_bounds(config.brackets), allocations
    ):
        slabs.append(
            {
                "lower": lower,
                "upper": upper,
                "rate": rate,
                "label": f"{_slab_label(lower, upper)} @ {format_percentage(rate)}",
                "taxable_amount": portion,
                "tax": tax,
            }
        )
    return slabs


def build_display(breakdown: TaxBreakdown) -> dict[str, str]:
    """Render the breakdown as currency strings for presentation."""

    return {
        "total_income": format_currency(breakdown.total_income),
        "standard_deductions": format_currency(breakdown.standard_deductions),
        "taxable_income": format_currency(breakdown.taxable_income),
        "computed_tax": format_currency(breakdown.computed_tax, decimals=2),
        "final_tax_before_cess": format_currency(
            breakdown.final_tax_before_cess, decimals=2
        ),
        "cess": format_currency(breakdown.cess),
        "tax_payable": format_currency(breakdown.tax_payable),
        "headline": format_currency(breakdown.tax_payable, decimals=2),
    }


def calculate_tax(
    payload: Mapping[str, Any] | CalculationRequest,
) -> dict[str, Any]:
    """Compute the tax summary for the provided payload."""

    request_model = _parse_request(payload)

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    config = resolve_configuration(request_model.year)
    engine = TaxEngine.from_configuration(config)

    with _profile_section("compute", timings):
        breakdown = engine.compute(request_model.income)

    with _profile_section("slabs", timings):
        slabs = build_slab_breakdown(breakdown, config)

    if breakdown.marginal_relief_applied:
        _LOGGER.debug(
            "Marginal relief capped tax at %.2f (computed %.2f) for %d",
            breakdown.final_tax_before_cess,
            breakdown.computed_tax,
            config.year,
        )

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate_tax timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    total_income = breakdown.total_income
    effective_tax_rate = (
        breakdown.tax_payable / total_income if total_income > 0 else 0.0
    )

    response_model = CalculationResponse.model_validate(
        {
            "summary": breakdown.as_dict(),
            "display": build_display(breakdown),
            "slabs": slabs,
            "effective_tax_rate": round_rate(effective_tax_rate),
            "marginal_rate": marginal_rate(breakdown.taxable_income, config.brackets),
            "rebate_applied": breakdown.rebate_applied,
            "marginal_relief_applied": breakdown.marginal_relief_applied,
            "meta": {
                "year": config.year,
                "label": config.label,
                "currency": config.currency,
            },
        }
    )

    return response_model.model_dump(mode="json", exclude_none=True)
