"""Command-line front-end for one-off new regime calculations."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Sequence

from newregime.backend.app.models import IncomeInput, TaxBreakdown
from newregime.backend.app.services.calculation_service import (
    build_display,
    calculate_tax,
)
from newregime.backend.app.services.session import CalculatorSession

_LOGGER = logging.getLogger(__name__)

_SUMMARY_ROWS = (
    ("total_income", "Total Income"),
    ("standard_deductions", "Standard Deductions"),
    ("taxable_income", "Taxable Income"),
    ("computed_tax", "Computed Tax (Without Relief)"),
    ("final_tax_before_cess", "Tax Before Cess (After Marginal Relief)"),
    ("cess", "Health & Education Cess"),
    ("tax_payable", "Tax Payable (With Cess)"),
)


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calculate income tax under the new regime slabs."
    )
    # Amounts stay strings so blanks and typos fall back to zero like the form.
    parser.add_argument("--salary", default="", help="Salary income")
    parser.add_argument("--interest", default="", help="Interest income")
    parser.add_argument("--rental", default="", help="Rental income")
    parser.add_argument("--other", default="", help="Income from other sources")
    parser.add_argument(
        "--year",
        type=int,
        default=None,
        help="Tax year to apply (defaults to the latest configured year)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full calculation payload as JSON",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def render_summary(breakdown: TaxBreakdown) -> str:
    """Return the printable calculation summary for ``breakdown``."""

    display = build_display(breakdown)
    width = max(len(label) for _, label in _SUMMARY_ROWS) + 1
    lines = [f"Tax Payable: {display['headline']}", "", "Calculation Summary"]
    for key, label in _SUMMARY_ROWS:
        lines.append(f"  {label + ':':<{width}} {display[key]}")
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the ``newregime-calculate`` console script."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    income = IncomeInput.model_validate(
        {
            "salary_income": args.salary,
            "interest": args.interest,
            "rental": args.rental,
            "other": args.other,
        }
    )

    try:
        if args.json:
            payload = calculate_tax({"year": args.year, "income": income})
            print(json.dumps(payload, indent=2, ensure_ascii=False))
            return 0

        session = CalculatorSession(year=args.year)
        breakdown = session.calculate(income)
    except ValueError as error:
        _LOGGER.debug("Calculation rejected", exc_info=True)
        print(f"error: {error}")
        return 2

    print(render_summary(breakdown))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
