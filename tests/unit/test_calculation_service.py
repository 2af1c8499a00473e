"""Unit tests for the calculation service orchestration."""

from __future__ import annotations

import logging

import pytest

from newregime.backend.app.models import CalculationRequest, IncomeInput
from newregime.backend.app.services.calculation_service import (
    build_display,
    calculate_breakdown,
    calculate_tax,
    resolve_configuration,
)


def test_calculate_tax_defaults_to_latest_year() -> None:
    result = calculate_tax({"salaryIncome": "2000000"})

    assert result["meta"] == {
        "year": 2025,
        "label": "FY 2025-26",
        "regime": "new",
        "currency": "INR",
    }
    assert result["summary"]["tax_payable"] == pytest.approx(192_400)


def test_calculate_tax_accepts_nested_income_and_snake_case() -> None:
    flat = calculate_tax({"year": 2025, "salary_income": 1_000_000, "rental": 400_000})
    nested = calculate_tax(
        {"year": 2025, "income": {"salaryIncome": 1_000_000, "rental": "400000"}}
    )

    assert flat["summary"] == nested["summary"]


def test_calculate_tax_accepts_request_models() -> None:
    request = CalculationRequest(year=2024, income=IncomeInput(salary_income=800_000))

    result = calculate_tax(request)

    assert result["meta"]["year"] == 2024
    assert result["summary"]["tax_payable"] == pytest.approx(23_400)


def test_calculate_tax_reports_display_strings() -> None:
    result = calculate_tax({"salaryIncome": "1276000"})

    assert result["display"] == {
        "total_income": "₹12,76,000",
        "standard_deductions": "₹75,000",
        "taxable_income": "₹12,01,000",
        "computed_tax": "₹60,150.00",
        "final_tax_before_cess": "₹1,000.00",
        "cess": "₹40",
        "tax_payable": "₹1,040",
        "headline": "₹1,040.00",
    }


def test_calculate_tax_flags_relief_and_rates() -> None:
    relief = calculate_tax({"salaryIncome": 1_276_000})
    rebate = calculate_tax({"salaryIncome": 1_000_000})
    full = calculate_tax({"salaryIncome": 2_000_000})

    assert relief["marginal_relief_applied"] is True
    assert relief["rebate_applied"] is False
    assert relief["marginal_rate"] == pytest.approx(0.15)
    assert rebate["rebate_applied"] is True
    assert rebate["effective_tax_rate"] == 0
    assert full["marginal_relief_applied"] is False
    assert full["effective_tax_rate"] == pytest.approx(0.0962)


def test_calculate_tax_slab_breakdown() -> None:
    result = calculate_tax({"salaryIncome": 2_000_000})

    slabs = result["slabs"]
    assert len(slabs) == 7
    assert slabs[0]["label"] == "₹0 - ₹4,00,000 @ 0%"
    assert slabs[-1]["label"] == "Above ₹24,00,000 @ 30%"
    assert "upper" not in slabs[-1]
    assert [slab["taxable_amount"] for slab in slabs] == pytest.approx(
        [400_000, 400_000, 400_000, 400_000, 325_000, 0, 0]
    )
    assert sum(slab["tax"] for slab in slabs) == pytest.approx(
        result["summary"]["computed_tax"]
    )


def test_calculate_tax_never_rejects_malformed_amounts() -> None:
    result = calculate_tax(
        {"salaryIncome": "not a number", "interest": None, "rental": "", "other": [3]}
    )

    assert result["summary"]["total_income"] == 0
    assert result["summary"]["tax_payable"] == 0


def test_calculate_tax_rejects_non_mapping_payloads() -> None:
    with pytest.raises(ValueError, match="mapping"):
        calculate_tax(["salaryIncome", 100])  # type: ignore[arg-type]


def test_calculate_tax_rejects_invalid_year() -> None:
    with pytest.raises(ValueError, match="Invalid calculation payload: year"):
        calculate_tax({"year": "next year", "salaryIncome": 100})


def test_calculate_tax_rejects_unconfigured_year() -> None:
    with pytest.raises(ValueError, match="Unsupported tax year: 2019"):
        calculate_tax({"year": 2019, "salaryIncome": 100})


def test_resolve_configuration_defaults_to_latest_year() -> None:
    assert resolve_configuration(None).year == 2025


def test_calculate_breakdown_matches_service_summary() -> None:
    breakdown = calculate_breakdown({"salaryIncome": 1_900_000}, 2025)

    assert calculate_tax({"salaryIncome": 1_900_000})["summary"] == pytest.approx(
        breakdown.as_dict()
    )


def test_build_display_rounds_only_tax_figures() -> None:
    breakdown = calculate_breakdown({"salaryIncome": "1300000.555"})

    display = build_display(breakdown)

    assert display["total_income"] == "₹13,00,000.555"
    assert display["computed_tax"].endswith(".08")


def test_profiling_logs_timings(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("NEWREGIME_PROFILE_CALCULATIONS", "yes")

    with caplog.at_level(logging.DEBUG, logger="newregime.backend.app.services"):
        calculate_tax({"salaryIncome": 1_276_000})

    messages = [record.getMessage() for record in caplog.records]
    assert any("calculate_tax timings" in message for message in messages)
    assert any("Marginal relief capped tax" in message for message in messages)
